"""Order payment capture.

One capture charges one order exactly once. The processor round trip, the
payment row and the order status change share a single transaction, so a
processor failure leaves no local trace.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.database import atomic
from storefront.core.errors import NotFoundError, ValidationError
from storefront.core.pagination import build_pagination, normalize_pagination
from storefront.models.order import Order, OrderPaymentStatus
from storefront.models.payment import Payment
from storefront.models.user import User
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.payment_card_repository import PaymentCardRepository
from storefront.repositories.payment_repository import PaymentRepository
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.payment import MakePaymentRequest
from storefront.services.payment_card_service import PaymentCardService
from storefront.services.payment_processor import PaymentProcessorBase

logger = logging.getLogger(__name__)

CARD_PAYMENT_METHOD_LABEL = "CARD"
MINOR_UNIT_MULTIPLIER = Decimal("100")


def to_minor_units(amount: Any) -> int:
    """Convert a decimal amount to the processor's integer minor units (half-up)."""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError("Invalid payment amount") from None
    if not value.is_finite() or value <= 0:
        raise ValidationError("Invalid payment amount")
    return int((value * MINOR_UNIT_MULTIPLIER).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def normalize_currency(value: str | None) -> str:
    if not value or not value.strip():
        return settings.DEFAULT_CURRENCY.upper()
    return value.strip().upper()


class PaymentService:
    def __init__(self, db: Session, processor: PaymentProcessorBase):
        self.db = db
        self.processor = processor
        self.orders = OrderRepository(db)
        self.payments = PaymentRepository(db)
        self.cards = PaymentCardRepository(db)
        self.users = UserRepository(db)
        self.card_service = PaymentCardService(db, processor)

    def list_payments(
        self,
        user_id: UUID,
        page: Any = None,
        limit: Any = None,
        order_id: UUID | None = None,
    ) -> tuple[list[Payment], dict[str, Any]]:
        request = normalize_pagination(page, limit)
        total = self.payments.count(user_id, order_id=order_id)
        payments = self.payments.get_all(
            user_id, skip=request.offset, limit=request.limit, order_id=order_id
        )
        return payments, build_pagination(total, request.page, request.limit)

    def capture(
        self,
        user: User,
        data: MakePaymentRequest,
        idempotency_key: str | None = None,
    ) -> Payment:
        """Charge an order and record the payment.

        ``idempotency_key`` is the client's ``Idempotency-Key``; when absent a
        fresh key is generated so that this attempt maps to one charge.
        """
        self._load_payable_order(data.order_id, user.id)
        customer_id = self.card_service.ensure_customer(user)
        currency = normalize_currency(data.currency)

        with atomic(self.db):
            self.users.lock(user.id)
            # Re-read under the lock so two racing captures cannot both pass
            order = self._load_payable_order(data.order_id, user.id, refresh=True)
            payment_card_id, payment_method_id = self._resolve_payment_method(
                user.id, customer_id, data
            )
            amount_minor = to_minor_units(order.total_amount)

            charge = self.processor.create_and_confirm_payment(
                amount_minor=amount_minor,
                currency=currency,
                payment_method_id=payment_method_id,
                customer_id=customer_id,
                idempotency_key=self._processor_idempotency_key(order, idempotency_key),
                metadata={"order_id": str(order.id), "user_id": str(user.id)},
            )

            payment = self.payments.create(
                user_id=user.id,
                order_id=order.id,  # type: ignore[arg-type]
                payment_card_id=payment_card_id,
                processor_payment_intent_id=charge.payment_intent_id,
                processor_payment_method_id=payment_method_id,
                amount=order.total_amount,  # type: ignore[arg-type]
                currency=currency,
                status=charge.status.upper(),
                receipt_url=charge.receipt_url,
            )
            self.orders.update(
                order,
                {
                    "payment_status": OrderPaymentStatus.PAID.value,
                    "payment_method": CARD_PAYMENT_METHOD_LABEL,
                },
            )

        logger.info(
            "Captured %d %s for order %s (intent %s)",
            amount_minor,
            currency,
            order.id,
            charge.payment_intent_id,
        )
        return payment

    def _load_payable_order(self, order_id: UUID, user_id: UUID, refresh: bool = False) -> Order:
        order = self.orders.get_by_id(order_id, user_id, refresh=refresh)
        if order is None:
            raise NotFoundError("Order not found")
        if order.payment_status == OrderPaymentStatus.PAID.value:
            raise ValidationError("Order already paid", 400)
        return order

    def _resolve_payment_method(
        self, user_id: UUID, customer_id: str, data: MakePaymentRequest
    ) -> tuple[UUID | None, str]:
        """Pick the token to charge: saved card, then one-off token."""
        if data.payment_card_id:
            card = self.cards.get_by_id(data.payment_card_id, user_id)
            if card is None:
                raise NotFoundError("Payment card not found")
            token = str(card.processor_payment_method_id)
            self.processor.attach_payment_method(token, customer_id)
            return card.id, token  # type: ignore[return-value]

        if data.processor_payment_method_id:
            token = data.processor_payment_method_id
            if data.save_card:
                card = self.card_service.save_card(
                    user_id, customer_id, token, data.cardholder_name, data.set_as_default
                )
                return card.id, str(card.processor_payment_method_id)  # type: ignore[return-value]
            self.processor.attach_payment_method(token, customer_id)
            return None, token

        raise ValidationError("Payment method is required")

    @staticmethod
    def _processor_idempotency_key(order: Order, client_key: str | None) -> str:
        if client_key:
            return f"capture:{order.user_id}:{order.id}:{client_key}"
        return f"capture:{order.id}:{uuid4().hex}"
