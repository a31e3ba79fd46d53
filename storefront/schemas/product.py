import json
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.schemas.common import PaginationMeta


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    display_order: int = Field(default=0, ge=0)


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    display_order: int
    is_active: bool
    created_at: datetime


class CategoryListData(BaseModel):
    categories: list[CategoryResponse]
    pagination: PaginationMeta


class CategoryData(BaseModel):
    category: CategoryResponse


class SubcategoryCreate(BaseModel):
    category_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    image_url: str | None = Field(default=None, max_length=1024)
    display_order: int = Field(default=0, ge=0)
    is_active: bool = True


class SubcategoryUpdate(BaseModel):
    category_id: UUID | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    image_url: str | None = Field(default=None, max_length=1024)
    display_order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class SubcategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category_id: UUID
    name: str
    description: str | None = None
    image_url: str | None = None
    display_order: int
    is_active: bool
    product_type_count: int = 0
    created_at: datetime


class SubcategoryListData(BaseModel):
    subcategories: list[SubcategoryResponse]
    pagination: PaginationMeta


class SubcategoryData(BaseModel):
    subcategory: SubcategoryResponse


def _parse_filters(value: Any) -> Any:
    """JSON text is decoded; text that is not a JSON object or list is dropped."""
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None
        return value if isinstance(value, dict | list) else None
    return value


class ProductTypeCreate(BaseModel):
    subcategory_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    description: str | None = None
    image_url: str | None = Field(default=None, max_length=1024)
    filters: dict[str, Any] | list[Any] | None = None
    display_order: int = Field(default=0, ge=0)
    is_active: bool = True

    @field_validator("filters", mode="before")
    @classmethod
    def parse_filters(cls, value: Any) -> Any:
        return _parse_filters(value)


class ProductTypeUpdate(BaseModel):
    subcategory_id: UUID | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    description: str | None = None
    image_url: str | None = Field(default=None, max_length=1024)
    filters: dict[str, Any] | list[Any] | None = None
    display_order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None

    @field_validator("filters", mode="before")
    @classmethod
    def parse_filters(cls, value: Any) -> Any:
        return _parse_filters(value)


class ProductTypeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    subcategory_id: UUID
    name: str
    slug: str
    description: str | None = None
    image_url: str | None = None
    filters: dict[str, Any] | list[Any] | None = None
    display_order: int
    is_active: bool
    product_count: int = 0
    created_at: datetime


class ProductTypeListData(BaseModel):
    product_types: list[ProductTypeResponse]
    pagination: PaginationMeta


class ProductTypeData(BaseModel):
    product_type: ProductTypeResponse


class ProductVariantCreate(BaseModel):
    sku: str = Field(..., min_length=1, max_length=128)
    name: str | None = Field(default=None, max_length=255)
    price: Decimal = Field(..., gt=0, decimal_places=2)
    discounted_price: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    stock: int = Field(default=0, ge=0)
    color: str | None = Field(default=None, max_length=64)
    size: str | None = Field(default=None, max_length=64)


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category_id: UUID | None = None
    subcategory_id: UUID | None = None
    product_type_id: UUID | None = None
    description: str | None = None
    brand: str | None = Field(default=None, max_length=255)
    base_price: Decimal = Field(..., gt=0, decimal_places=2)
    display_order: int = Field(default=0, ge=0)
    variants: list[ProductVariantCreate] = Field(default_factory=list)


class ProductVariantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sku: str
    name: str | None = None
    price: Decimal
    discounted_price: Decimal | None = None
    stock: int
    color: str | None = None
    size: str | None = None
    bought_count: int
    is_active: bool


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category_id: UUID | None = None
    subcategory_id: UUID | None = None
    product_type_id: UUID | None = None
    name: str
    description: str | None = None
    brand: str | None = None
    base_price: Decimal
    display_order: int
    is_active: bool
    created_at: datetime
    variants: list[ProductVariantResponse] = Field(default_factory=list)


class ProductListData(BaseModel):
    products: list[ProductResponse]
    pagination: PaginationMeta


class ProductData(BaseModel):
    product: ProductResponse
