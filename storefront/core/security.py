"""Password hashing and JWT issuance."""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

import bcrypt
import jwt

from storefront.core.config import settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def _encode(user_id: UUID, token_type: str, lifetime: timedelta) -> tuple[str, datetime]:
    now = datetime.now(UTC)
    expires_at = now + lifetime
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "type": token_type,
        "iat": now,
        "exp": expires_at,
        # Two tokens minted in the same second must still differ
        "jti": uuid4().hex,
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expires_at


def create_access_token(user_id: UUID) -> str:
    token, _ = _encode(
        user_id, ACCESS_TOKEN_TYPE, timedelta(minutes=settings.ACCESS_TOKEN_TTL_MINUTES)
    )
    return token


def create_refresh_token(user_id: UUID) -> tuple[str, datetime]:
    return _encode(user_id, REFRESH_TOKEN_TYPE, timedelta(days=settings.REFRESH_TOKEN_TTL_DAYS))


def decode_token(token: str, expected_type: str) -> dict[str, Any]:
    """Decode and verify a token.

    Raises ``jwt.InvalidTokenError`` (or a subclass) when the signature,
    expiry or token type does not check out.
    """
    payload: dict[str, Any] = jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp", "sub", "type"]},
    )
    if payload.get("type") != expected_type:
        raise jwt.InvalidTokenError(f"Expected a {expected_type} token")
    return payload


def seconds_until_expiry(payload: dict[str, Any]) -> int:
    exp = int(payload.get("exp", 0))
    return max(exp - int(datetime.now(UTC).timestamp()), 0)
