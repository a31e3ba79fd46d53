"""Payment schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.schemas.common import PaginationMeta
from storefront.schemas.order import OrderResponse
from storefront.schemas.payment_card import PaymentCardResponse


class MakePaymentRequest(BaseModel):
    """Schema for capturing payment for an order.

    Either a saved card or a one-off processor token must be given.
    """

    order_id: UUID
    payment_card_id: UUID | None = None
    processor_payment_method_id: str | None = Field(default=None, min_length=1, max_length=255)
    cardholder_name: str | None = Field(default=None, min_length=2, max_length=255)
    save_card: bool = False
    set_as_default: bool = False
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    order_id: UUID
    payment_card_id: UUID | None = None
    processor_payment_intent_id: str
    processor_payment_method_id: str
    amount: Decimal
    currency: str
    status: str
    receipt_url: str | None = None
    created_at: datetime
    order: OrderResponse | None = None
    payment_card: PaymentCardResponse | None = None


class PaymentListData(BaseModel):
    payments: list[PaymentResponse]
    pagination: PaginationMeta


class PaymentData(BaseModel):
    payment: PaymentResponse
