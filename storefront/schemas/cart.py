from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.schemas.common import PaginationMeta


class CartItemCreate(BaseModel):
    product_id: UUID
    product_variant_sku: str | None = Field(default=None, max_length=128)
    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., gt=0, decimal_places=2)


class CartItemUpdate(BaseModel):
    quantity: int | None = Field(default=None, ge=1)
    price: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    product_variant_sku: str | None = Field(default=None, max_length=128)


class CartItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID
    product_variant_sku: str | None = None
    quantity: int
    price: Decimal
    created_at: datetime
    updated_at: datetime


class CartListData(BaseModel):
    carts: list[CartItemResponse]
    pagination: PaginationMeta


class CartItemData(BaseModel):
    cart: CartItemResponse


class CartClearData(BaseModel):
    deleted: int
