"""Pydantic schemas for wishlists."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.schemas.common import PaginationMeta
from storefront.schemas.product import ProductResponse


class WishlistCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    is_default: bool = False


class WishlistUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    is_default: bool | None = None


class WishlistItemCreate(BaseModel):
    product_id: UUID


class WishlistItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    wishlist_id: UUID
    product_id: UUID
    created_at: datetime
    product: ProductResponse | None = None


class WishlistResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    is_default: bool
    created_at: datetime
    updated_at: datetime
    items: list[WishlistItemResponse] = Field(default_factory=list)


class WishlistListData(BaseModel):
    wishlists: list[WishlistResponse]
    pagination: PaginationMeta


class WishlistData(BaseModel):
    wishlist: WishlistResponse


class WishlistItemListData(BaseModel):
    items: list[WishlistItemResponse]
    pagination: PaginationMeta


class WishlistItemData(BaseModel):
    item: WishlistItemResponse
