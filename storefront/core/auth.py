from uuid import UUID

import jwt
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.errors import AuthError
from storefront.core.security import ACCESS_TOKEN_TYPE, decode_token
from storefront.core.token_blacklist import TokenBlacklist, get_token_blacklist
from storefront.models.user import User
from storefront.repositories.user_repository import UserRepository


def get_bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise AuthError("Authorization token is required")

    if not auth_header.startswith("Bearer "):
        raise AuthError("Invalid authorization header format")

    token = auth_header[7:].strip()
    if not token:
        raise AuthError("Authorization token is required")
    return token


def get_current_user(
    token: str = Depends(get_bearer_token),
    blacklist: TokenBlacklist = Depends(get_token_blacklist),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the authenticated, active user from the bearer access token."""
    if blacklist.contains(token):
        raise AuthError("Token has been invalidated")

    try:
        payload = decode_token(token, ACCESS_TOKEN_TYPE)
        user_id = UUID(str(payload["sub"]))
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired") from None
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise AuthError("Invalid token") from None

    user = UserRepository(db).get_by_id(user_id, active_only=True)
    if user is None:
        raise AuthError("User not found or inactive")
    return user
