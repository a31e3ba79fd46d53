"""Repository for PaymentCard operations."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.models.payment_card import PaymentCard


class PaymentCardRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self, user_id: UUID, skip: int = 0, limit: int = 100) -> list[PaymentCard]:
        return (
            self.db.query(PaymentCard)
            .filter(PaymentCard.user_id == user_id)
            .order_by(PaymentCard.is_default.desc(), PaymentCard.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, user_id: UUID) -> int:
        return self.db.query(PaymentCard).filter(PaymentCard.user_id == user_id).count()

    def get_by_id(
        self, card_id: UUID, user_id: UUID, refresh: bool = False
    ) -> PaymentCard | None:
        query = self.db.query(PaymentCard).filter(
            PaymentCard.id == card_id, PaymentCard.user_id == user_id
        )
        if refresh:
            query = query.populate_existing()
        return query.first()

    def get_default(self, user_id: UUID) -> PaymentCard | None:
        return (
            self.db.query(PaymentCard)
            .filter(
                PaymentCard.user_id == user_id,
                PaymentCard.is_default == True,  # noqa: E712
            )
            .order_by(PaymentCard.updated_at.desc())
            .first()
        )

    def get_most_recent(self, user_id: UUID) -> PaymentCard | None:
        return (
            self.db.query(PaymentCard)
            .filter(PaymentCard.user_id == user_id)
            .order_by(PaymentCard.created_at.desc())
            .first()
        )

    def clear_defaults(self, user_id: UUID, except_id: UUID | None = None) -> int:
        """Unset ``is_default`` on every card of the user, optionally sparing one."""
        query = self.db.query(PaymentCard).filter(
            PaymentCard.user_id == user_id,
            PaymentCard.is_default == True,  # noqa: E712
        )
        if except_id is not None:
            query = query.filter(PaymentCard.id != except_id)
        count = query.update({"is_default": False}, synchronize_session="fetch")
        # Flush the cleared flags before the new default is written
        self.db.flush()
        return int(count)

    def set_default_flag(self, card: PaymentCard) -> PaymentCard:
        card.is_default = True  # type: ignore[assignment]
        self.db.flush()
        return card

    def create(self, user_id: UUID, data: dict[str, Any]) -> PaymentCard:
        card = PaymentCard(user_id=user_id, **data)
        self.db.add(card)
        self.db.flush()
        return card

    def update(self, card: PaymentCard, data: dict[str, Any]) -> PaymentCard:
        for key, value in data.items():
            setattr(card, key, value)
        self.db.flush()
        return card

    def delete(self, card: PaymentCard) -> None:
        self.db.delete(card)
        self.db.flush()
