from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from storefront.core.database import get_db
from storefront.core.responses import envelope
from storefront.schemas.common import Envelope
from storefront.schemas.search import SearchData
from storefront.services.search_service import SearchService

router = APIRouter()


@router.get(
    "",
    response_model=Envelope[SearchData],
    summary="Search the catalog",
    responses={422: {"description": "Search term is required"}},
)
async def search(
    request: Request,
    q: str | None = Query(default=None, description="Free text; aliases: query, term, search"),
    sections: str | None = Query(
        default=None, description="Comma-separated: categories, subcategories, products"
    ),
    db: Session = Depends(get_db),
) -> dict:
    """Search categories, subcategories and products in one call.

    Product filters: ``category_id``, ``subcategory_id``, ``product_type_id``,
    ``price_min`` / ``price_max`` (or ``min_price`` / ``max_price``),
    ``in_stock``. Price, colour and size hints in the text are applied too.
    Each section is paged with ``<section>_page`` / ``<section>_limit``.
    """
    data = SearchService(db).search(request.query_params)
    return envelope("Search results fetched successfully", data)
