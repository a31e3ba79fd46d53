from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.auth import get_current_user
from storefront.core.database import get_db
from storefront.core.responses import envelope
from storefront.models.user import User
from storefront.schemas.common import Empty, Envelope
from storefront.schemas.product import (
    ProductTypeListData,
    SubcategoryCreate,
    SubcategoryData,
    SubcategoryListData,
    SubcategoryUpdate,
)
from storefront.services.taxonomy_service import TaxonomyService

router = APIRouter()


@router.get("", response_model=Envelope[SubcategoryListData], summary="List subcategories")
async def list_subcategories(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    category_id: UUID | None = Query(default=None),
    search: str | None = Query(default=None, max_length=255),
    include_inactive: bool = Query(default=False),
    db: Session = Depends(get_db),
) -> dict:
    """Optionally narrowed to one category or a name/description search."""
    subcategories, pagination = TaxonomyService(db).list_subcategories(
        page, limit, category_id, search, include_inactive
    )
    return envelope(
        "Subcategories fetched successfully",
        {"subcategories": subcategories, "pagination": pagination},
    )


@router.post(
    "",
    response_model=Envelope[SubcategoryData],
    status_code=201,
    summary="Create subcategory",
    responses={404: {"description": "Category not found"}},
)
async def create_subcategory(
    data: SubcategoryCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    subcategory = TaxonomyService(db).create_subcategory(data)
    return envelope("Subcategory created successfully", {"subcategory": subcategory})


@router.get(
    "/{subcategory_id}",
    response_model=Envelope[SubcategoryData],
    summary="Get subcategory",
    responses={404: {"description": "Subcategory not found"}},
)
async def get_subcategory(subcategory_id: UUID, db: Session = Depends(get_db)) -> dict:
    subcategory = TaxonomyService(db).get_subcategory(subcategory_id)
    return envelope("Subcategory fetched successfully", {"subcategory": subcategory})


@router.get(
    "/{subcategory_id}/product-types",
    response_model=Envelope[ProductTypeListData],
    summary="List product types of a subcategory",
    responses={404: {"description": "Subcategory not found"}},
)
async def list_subcategory_product_types(
    subcategory_id: UUID,
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
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


@router.patch(
    "/{subcategory_id}",
    response_model=Envelope[SubcategoryData],
    summary="Update subcategory",
    responses={404: {"description": "Subcategory or category not found"}},
)
async def update_subcategory(
    subcategory_id: UUID,
    data: SubcategoryUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    subcategory = TaxonomyService(db).update_subcategory(
        subcategory_id, data.model_dump(exclude_unset=True)
    )
    return envelope("Subcategory updated successfully", {"subcategory": subcategory})


@router.delete(
    "/{subcategory_id}",
    response_model=Envelope[Empty],
    summary="Delete subcategory",
    responses={404: {"description": "Subcategory not found"}},
)
async def delete_subcategory(
    subcategory_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Its product types go with it; products keep existing without a subcategory."""
    TaxonomyService(db).delete_subcategory(subcategory_id)
    return envelope("Subcategory deleted successfully")
