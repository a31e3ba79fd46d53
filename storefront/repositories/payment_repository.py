"""Payment repository for data access."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from storefront.models.payment import Payment


class PaymentRepository:
    """Repository for Payment model. Payments are insert-only."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        user_id: UUID,
        skip: int = 0,
        limit: int = 100,
        order_id: UUID | None = None,
    ) -> list[Payment]:
        """Get a user's payments, newest first, optionally for one order."""
        query = self.db.query(Payment).filter(Payment.user_id == user_id)
        if order_id:
            query = query.filter(Payment.order_id == order_id)
        return (
            query.options(selectinload(Payment.order), selectinload(Payment.payment_card))
            .order_by(Payment.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, user_id: UUID, order_id: UUID | None = None) -> int:
        query = self.db.query(Payment).filter(Payment.user_id == user_id)
        if order_id:
            query = query.filter(Payment.order_id == order_id)
        return query.count()

    def create(
        self,
        *,
        user_id: UUID,
        order_id: UUID,
        payment_card_id: UUID | None,
        processor_payment_intent_id: str,
        processor_payment_method_id: str,
        amount: Decimal,
        currency: str,
        status: str,
        receipt_url: str | None = None,
    ) -> Payment:
        """Record a processor charge."""
        payment = Payment(
            user_id=user_id,
            order_id=order_id,
            payment_card_id=payment_card_id,
            processor_payment_intent_id=processor_payment_intent_id,
            processor_payment_method_id=processor_payment_method_id,
            amount=amount,
            currency=currency,
            status=status,
            receipt_url=receipt_url,
        )
        self.db.add(payment)
        self.db.flush()
        return payment
