from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.auth import get_current_user
from storefront.core.database import get_db
from storefront.core.responses import envelope
from storefront.models.user import User
from storefront.schemas.common import Envelope
from storefront.schemas.product import CategoryCreate, CategoryData, CategoryListData
from storefront.services.catalog_service import CatalogService

router = APIRouter()


@router.get("", response_model=Envelope[CategoryListData], summary="List categories")
async def list_categories(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    search: str | None = Query(default=None, max_length=255),
    db: Session = Depends(get_db),
) -> dict:
    categories, pagination = CatalogService(db).list_categories(page, limit, search)
    return envelope(
        "Categories fetched successfully", {"categories": categories, "pagination": pagination}
    )


@router.post(
    "",
    response_model=Envelope[CategoryData],
    status_code=201,
    summary="Create category",
    responses={409: {"description": "Category name already exists"}},
)
async def create_category(
    data: CategoryCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    category = CatalogService(db).create_category(data)
    return envelope("Category created successfully", {"category": category})
