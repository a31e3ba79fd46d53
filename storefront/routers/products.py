from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.auth import get_current_user
from storefront.core.database import get_db
from storefront.core.responses import envelope
from storefront.models.user import User
from storefront.schemas.common import Envelope
from storefront.schemas.product import ProductCreate, ProductData, ProductListData
from storefront.services.catalog_service import CatalogService

router = APIRouter()


@router.get("", response_model=Envelope[ProductListData], summary="List products")
async def list_products(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    category_id: UUID | None = Query(default=None),
    search: str | None = Query(default=None, max_length=255),
    subcategory_id: UUID | None = Query(default=None),
    product_type_id: UUID | None = Query(default=None),
    db: Session = Depends(get_db),
) -> dict:
    """List active products, optionally filtered by catalog placement or a text search."""
    products, pagination = CatalogService(db).list_products(
        page, limit, category_id, search, subcategory_id, product_type_id
    )
    return envelope(
        "Products fetched successfully", {"products": products, "pagination": pagination}
    )


@router.get(
    "/{product_id}",
    response_model=Envelope[ProductData],
    summary="Get product",
    responses={404: {"description": "Product not found"}},
)
async def get_product(product_id: UUID, db: Session = Depends(get_db)) -> dict:
    product = CatalogService(db).get_product(product_id)
    return envelope("Product fetched successfully", {"product": product})


@router.post(
    "",
    response_model=Envelope[ProductData],
    status_code=201,
    summary="Create product with variants",
    responses={409: {"description": "Duplicate SKU"}},
)
async def create_product(
    data: ProductCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    product = CatalogService(db).create_product(data)
    return envelope("Product created successfully", {"product": product})
