"""Pydantic schemas for the payment-card vault."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.schemas.common import PaginationMeta


class PaymentCardCreate(BaseModel):
    processor_payment_method_id: str = Field(..., min_length=1, max_length=255)
    cardholder_name: str = Field(..., min_length=2, max_length=255)
    set_as_default: bool = False


class PaymentCardUpdate(BaseModel):
    cardholder_name: str | None = Field(default=None, min_length=2, max_length=255)


class MakeDefaultCardRequest(BaseModel):
    id: UUID


class PaymentCardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    processor_payment_method_id: str
    brand: str
    last4: str
    exp_month: int
    exp_year: int
    cardholder_name: str
    country: str | None = None
    is_default: bool
    created_at: datetime
    updated_at: datetime


class PaymentCardListData(BaseModel):
    cards: list[PaymentCardResponse]
    pagination: PaginationMeta


class PaymentCardData(BaseModel):
    card: PaymentCardResponse | None = None
