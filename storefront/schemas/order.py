from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.models.order import OrderPaymentStatus, OrderRating, OrderStatus
from storefront.schemas.common import PaginationMeta


def _upper(value: Any) -> Any:
    return value.strip().upper() if isinstance(value, str) else value


class OrderItemCreate(BaseModel):
    product_id: UUID | None = None
    product_snapshot: dict[str, Any]
    price: Decimal = Field(..., gt=0, decimal_places=2)
    quantity: int = Field(..., ge=1)
    subtotal: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    variant_info: str | dict[str, Any] | None = None


class OrderCreate(BaseModel):
    shipping_address: dict[str, Any]
    items: list[OrderItemCreate] = Field(..., min_length=1)
    total_amount: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    promocode: str | None = Field(default=None, max_length=255)
    payment_method: str = Field(..., min_length=1, max_length=255)
    status: OrderStatus | None = None
    rating: OrderRating | None = None

    @field_validator("status", "rating", mode="before")
    @classmethod
    def normalize_enums(cls, value: Any) -> Any:
        return _upper(value)


class OrderUpdate(BaseModel):
    status: OrderStatus | None = None
    rating: OrderRating | None = None

    @field_validator("status", "rating", mode="before")
    @classmethod
    def normalize_enums(cls, value: Any) -> Any:
        return _upper(value)


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID | None = None
    product_snapshot: dict[str, Any]
    quantity: int
    price: Decimal
    subtotal: Decimal
    variant_info: str | None = None


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    total_amount: Decimal
    shipping_address: dict[str, Any]
    promocode: str | None = None
    status: OrderStatus
    payment_status: OrderPaymentStatus
    payment_method: str
    rating: OrderRating | None = None
    created_at: datetime
    updated_at: datetime
    order_items: list[OrderItemResponse] = Field(default_factory=list)


class OrderListData(BaseModel):
    orders: list[OrderResponse]
    pagination: PaginationMeta


class OrderData(BaseModel):
    order: OrderResponse
