from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.schemas.common import PaginationMeta


class BestSellerItem(BaseModel):
    product_id: UUID
    product_name: str
    sku: str
    variant_name: str | None = None
    price: Decimal
    bought_count: int


class DashboardSection(BaseModel):
    items: list[Any]
    pagination: PaginationMeta


class OrderSummary(BaseModel):
    order_count: int
    paid_order_count: int
    total_spent: Decimal


class DashboardMeta(BaseModel):
    total_item_count: int


class DashboardData(BaseModel):
    summary: OrderSummary
    sections: dict[str, DashboardSection]
    meta: DashboardMeta


class DashboardOfferCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    subtitle: str | None = Field(default=None, max_length=255)
    description: str | None = None
    discount_label: str | None = Field(default=None, max_length=64)
    action_label: str | None = Field(default=None, max_length=64)
    target_url: str | None = Field(default=None, max_length=1024)
    image_url: str | None = Field(default=None, max_length=1024)
    display_order: int = Field(default=0, ge=0)
    is_active: bool = True


class DashboardOfferUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    subtitle: str | None = Field(default=None, max_length=255)
    description: str | None = None
    discount_label: str | None = Field(default=None, max_length=64)
    action_label: str | None = Field(default=None, max_length=64)
    target_url: str | None = Field(default=None, max_length=1024)
    image_url: str | None = Field(default=None, max_length=1024)
    display_order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class DashboardOfferResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    subtitle: str | None = None
    description: str | None = None
    discount_label: str | None = None
    action_label: str | None = None
    target_url: str | None = None
    image_url: str | None = None
    display_order: int
    is_active: bool
    created_at: datetime


class DashboardOfferData(BaseModel):
    offer: DashboardOfferResponse


class DashboardBrandCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    tagline: str | None = Field(default=None, max_length=255)
    logo_url: str | None = Field(default=None, max_length=1024)
    is_featured: bool = False
    display_order: int = Field(default=0, ge=0)


class DashboardBrandUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    tagline: str | None = Field(default=None, max_length=255)
    logo_url: str | None = Field(default=None, max_length=1024)
    is_featured: bool | None = None
    display_order: int | None = Field(default=None, ge=0)


class DashboardBrandResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    tagline: str | None = None
    logo_url: str | None = None
    is_featured: bool
    display_order: int


class DashboardBrandData(BaseModel):
    brand: DashboardBrandResponse
