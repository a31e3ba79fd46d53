"""Redis-backed blacklist of invalidated access tokens.

Entries expire together with the token, so the set never outgrows the live
token population and every API instance sees the same revocations.
"""

import hashlib
from functools import lru_cache

import redis

from storefront.core.config import settings

KEY_PREFIX = "storefront:blacklist:"


def _key(token: str) -> str:
    return KEY_PREFIX + hashlib.sha256(token.encode("utf-8")).hexdigest()


class TokenBlacklist:
    def __init__(self, client: redis.Redis):
        self.client = client

    def add(self, token: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            # Already expired, the signature check rejects it anyway
            return
        self.client.set(_key(token), "1", ex=ttl_seconds)

    def contains(self, token: str) -> bool:
        return bool(self.client.exists(_key(token)))


@lru_cache(maxsize=1)
def _redis_client() -> redis.Redis:
    return redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)


def get_token_blacklist() -> TokenBlacklist:
    """FastAPI dependency returning the shared blacklist."""
    return TokenBlacklist(_redis_client())
