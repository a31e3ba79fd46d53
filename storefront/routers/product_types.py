from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.auth import get_current_user
from storefront.core.database import get_db
from storefront.core.responses import envelope
from storefront.models.user import User
from storefront.schemas.common import Empty, Envelope
from storefront.schemas.product import (
    ProductTypeCreate,
    ProductTypeData,
    ProductTypeListData,
    ProductTypeUpdate,
)
from storefront.services.taxonomy_service import TaxonomyService

router = APIRouter()


@router.get("", response_model=Envelope[ProductTypeListData], summary="List product types")
async def list_product_types(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    subcategory_id: UUID | None = Query(default=None),
    include_inactive: bool = Query(default=False),
    db: Session = Depends(get_db),
) -> dict:
    product_types, pagination = TaxonomyService(db).list_product_types(
        page, limit, subcategory_id, include_inactive
    )
    return envelope(
        "Product types fetched successfully",
        {"product_types": product_types, "pagination": pagination},
    )


@router.post(
    "",
    response_model=Envelope[ProductTypeData],
    status_code=201,
    summary="Create product type",
    responses={
        404: {"description": "Subcategory not found"},
        409: {"description": "Slug already exists"},
    },
)
async def create_product_type(
    data: ProductTypeCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """``slug`` defaults to the name in lower-case words joined by hyphens."""
    product_type = TaxonomyService(db).create_product_type(data)
    return envelope("Product type created successfully", {"product_type": product_type})


@router.get(
    "/{product_type_id}",
    response_model=Envelope[ProductTypeData],
    summary="Get product type",
    responses={404: {"description": "Product type not found"}},
)
async def get_product_type(product_type_id: UUID, db: Session = Depends(get_db)) -> dict:
    product_type = TaxonomyService(db).get_product_type(product_type_id)
    return envelope("Product type fetched successfully", {"product_type": product_type})


@router.patch(
    "/{product_type_id}",
    response_model=Envelope[ProductTypeData],
    summary="Update product type",
    responses={
        404: {"description": "Product type or subcategory not found"},
        409: {"description": "Slug already exists"},
    },
)
async def update_product_type(
    product_type_id: UUID,
    data: ProductTypeUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    product_type = TaxonomyService(db).update_product_type(
        product_type_id, data.model_dump(exclude_unset=True)
    )
    return envelope("Product type updated successfully", {"product_type": product_type})


@router.delete(
    "/{product_type_id}",
    response_model=Envelope[Empty],
    summary="Delete product type",
    responses={404: {"description": "Product type not found"}},
)
async def delete_product_type(
    product_type_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    TaxonomyService(db).delete_product_type(product_type_id)
    return envelope("Product type deleted successfully")
