"""Repository for RefreshToken operations."""

from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from storefront.models.refresh_token import RefreshToken


class RefreshTokenRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: UUID, token: str, expires_at: datetime) -> RefreshToken:
        record = RefreshToken(user_id=user_id, token=token, expires_at=expires_at)
        self.db.add(record)
        self.db.flush()
        return record

    def get_by_token(self, token: str) -> RefreshToken | None:
        return self.db.query(RefreshToken).filter(RefreshToken.token == token).first()

    def revoke(self, record: RefreshToken) -> RefreshToken:
        record.revoked = True  # type: ignore[assignment]
        self.db.flush()
        return record

    def revoke_all_for_user(self, user_id: UUID) -> int:
        count = (
            self.db.query(RefreshToken)
            .filter(RefreshToken.user_id == user_id, RefreshToken.revoked == False)  # noqa: E712
            .update({"revoked": True}, synchronize_session=False)
        )
        return int(count)

    def delete_expired(self, now: datetime | None = None) -> int:
        cutoff = now or datetime.now(UTC)
        count = (
            self.db.query(RefreshToken)
            .filter(or_(RefreshToken.expires_at < cutoff, RefreshToken.revoked == True))  # noqa: E712
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return int(count)
