"""Signup, signin, token rotation and logout."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.database import atomic
from storefront.core.errors import AuthError, ConflictError, ValidationError
from storefront.core.security import (
    ACCESS_TOKEN_TYPE,
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    seconds_until_expiry,
    verify_password,
)
from storefront.core.token_blacklist import TokenBlacklist
from storefront.models.user import User
from storefront.repositories.refresh_token_repository import RefreshTokenRepository
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.auth import SignupRequest

logger = logging.getLogger(__name__)


@dataclass
class IssuedTokens:
    user: User
    access_token: str
    refresh_token: str


def _default_display_name(first_name: str | None, last_name: str | None) -> str | None:
    parts = [p.strip() for p in (first_name, last_name) if p and p.strip()]
    return " ".join(parts) or None


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserRepository(db)
        self.refresh_tokens = RefreshTokenRepository(db)

    def signup(self, data: SignupRequest) -> IssuedTokens:
        if self.users.get_by_email(data.email) is not None:
            raise ConflictError("Email is already registered")

        try:
            with atomic(self.db):
                user = self.users.create(
                    email=data.email,
                    password_hash=hash_password(data.password),
                    first_name=data.first_name,
                    last_name=data.last_name,
                    display_name=data.display_name
                    or _default_display_name(data.first_name, data.last_name),
                    phone_number=data.phone_number,
                )
                tokens = self._issue(user)
        except IntegrityError as e:
            raise ConflictError("Email is already registered") from e

        logger.info("User %s signed up", user.id)
        return tokens

    def signin(self, email: str, password: str) -> IssuedTokens:
        user = self.users.get_by_email(email)
        if user is None or not verify_password(password, str(user.password_hash)):
            raise AuthError("Invalid email or password")
        if not user.is_active:
            raise AuthError("Account is inactive")

        with atomic(self.db):
            tokens = self._issue(user)
        return tokens

    def refresh(self, refresh_token: str) -> IssuedTokens:
        """Rotate a refresh token: the presented token is revoked for good."""
        try:
            decode_token(refresh_token, REFRESH_TOKEN_TYPE)
        except jwt.ExpiredSignatureError:
            raise AuthError("Refresh token has expired") from None
        except jwt.InvalidTokenError:
            raise AuthError("Invalid refresh token") from None

        record = self.refresh_tokens.get_by_token(refresh_token)
        if record is None or record.revoked:
            raise AuthError("Invalid refresh token")
        if record.expires_at.replace(tzinfo=None) < datetime.now(UTC).replace(tzinfo=None):
            raise AuthError("Refresh token has expired")

        user = self.users.get_by_id(record.user_id, active_only=True)  # type: ignore[arg-type]
        if user is None:
            raise AuthError("User not found or inactive")

        with atomic(self.db):
            self.refresh_tokens.revoke(record)
            tokens = self._issue(user)
        return tokens

    def logout(self, access_token: str, blacklist: TokenBlacklist) -> None:
        try:
            payload = decode_token(access_token, ACCESS_TOKEN_TYPE)
        except jwt.InvalidTokenError:
            raise AuthError("Invalid token") from None
        blacklist.add(access_token, seconds_until_expiry(payload))

    def update_password(self, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, str(user.password_hash)):
            raise AuthError("Current password is incorrect")
        if current_password == new_password:
            raise ValidationError("New password must differ from the current one")
        with atomic(self.db):
            self.users.update(user, {"password_hash": hash_password(new_password)})
        logger.info("Password updated for user %s", user.id)

    def deactivate(self, user: User) -> None:
        with atomic(self.db):
            self.users.deactivate(user)
            self.refresh_tokens.revoke_all_for_user(user.id)  # type: ignore[arg-type]
        logger.info("User %s deactivated", user.id)

    def _issue(self, user: User) -> IssuedTokens:
        access_token = create_access_token(user.id)  # type: ignore[arg-type]
        refresh_token, expires_at = create_refresh_token(user.id)  # type: ignore[arg-type]
        self.refresh_tokens.create(user.id, refresh_token, expires_at)  # type: ignore[arg-type]
        return IssuedTokens(user=user, access_token=access_token, refresh_token=refresh_token)
