"""Repository for claimed idempotency keys."""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.models.idempotency_record import IdempotencyRecord


class IdempotencyRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_key(self, user_id: UUID, idempotency_key: str) -> IdempotencyRecord | None:
        return (
            self.db.query(IdempotencyRecord)
            .filter(
                IdempotencyRecord.user_id == user_id,
                IdempotencyRecord.idempotency_key == idempotency_key,
            )
            .populate_existing()
            .first()
        )

    def claim(
        self, user_id: UUID, idempotency_key: str, order_id: UUID
    ) -> IdempotencyRecord | None:
        """Insert an in-flight record for the key.

        Returns ``None`` when another request inserted the same key first.
        """
        record = IdempotencyRecord(
            user_id=user_id, idempotency_key=idempotency_key, order_id=order_id
        )
        self.db.add(record)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return None
        self.db.refresh(record)
        return record

    def complete(
        self,
        record: IdempotencyRecord,
        response_status: int,
        response_body: dict[str, Any],
    ) -> IdempotencyRecord:
        record.response_status = response_status  # type: ignore[assignment]
        record.response_body = response_body  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(record)
        return record

    def release(self, user_id: UUID, idempotency_key: str) -> int:
        """Drop an in-flight claim so the client can retry with the same key."""
        count = (
            self.db.query(IdempotencyRecord)
            .filter(
                IdempotencyRecord.user_id == user_id,
                IdempotencyRecord.idempotency_key == idempotency_key,
                IdempotencyRecord.response_status.is_(None),
            )
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return int(count)

    def delete_expired(self, max_age_hours: int = 24) -> int:
        cutoff = datetime.now(UTC) - timedelta(hours=max_age_hours)
        count = (
            self.db.query(IdempotencyRecord)
            .filter(IdempotencyRecord.created_at < cutoff)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return int(count)
