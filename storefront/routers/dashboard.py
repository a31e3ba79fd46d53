from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from storefront.core.auth import get_current_user
from storefront.core.database import get_db
from storefront.core.responses import envelope
from storefront.models.user import User
from storefront.schemas.common import Empty, Envelope
from storefront.schemas.dashboard import (
    DashboardBrandCreate,
    DashboardBrandData,
    DashboardBrandUpdate,
    DashboardData,
    DashboardOfferCreate,
    DashboardOfferData,
    DashboardOfferUpdate,
)
from storefront.services.dashboard_service import DashboardContentService, DashboardService

router = APIRouter()


@router.get("", response_model=Envelope[DashboardData], summary="Home dashboard")
async def get_dashboard(
    request: Request,
    sections: str | None = Query(
        default=None,
        description=(
            "Comma-separated: offers, categories, previous_orders, track_orders, "
            "products, brands"
        ),
    ),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Each requested section is paged on its own via ``<prefix>_page`` / ``<prefix>_limit``."""
    service = DashboardService(db)
    data = service.build(current_user.id, request.query_params)  # type: ignore[arg-type]
    return envelope("Dashboard fetched successfully", data)


@router.post(
    "/offers",
    response_model=Envelope[DashboardOfferData],
    status_code=201,
    summary="Create dashboard offer",
)
async def create_offer(
    data: DashboardOfferCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    offer = DashboardContentService(db).create_offer(data)
    return envelope("Dashboard offer created successfully", {"offer": offer})


@router.patch(
    "/offers/{offer_id}",
    response_model=Envelope[DashboardOfferData],
    summary="Update dashboard offer",
    responses={404: {"description": "Dashboard offer not found"}},
)
async def update_offer(
    offer_id: UUID,
    data: DashboardOfferUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    offer = DashboardContentService(db).update_offer(offer_id, data.model_dump(exclude_unset=True))
    return envelope("Dashboard offer updated successfully", {"offer": offer})


@router.delete(
    "/offers/{offer_id}",
    response_model=Envelope[Empty],
    summary="Delete dashboard offer",
    responses={404: {"description": "Dashboard offer not found"}},
)
async def delete_offer(
    offer_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    DashboardContentService(db).delete_offer(offer_id)
    return envelope("Dashboard offer deleted successfully")


@router.post(
    "/brands",
    response_model=Envelope[DashboardBrandData],
    status_code=201,
    summary="Create dashboard brand",
)
async def create_brand(
    data: DashboardBrandCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    brand = DashboardContentService(db).create_brand(data)
    return envelope("Dashboard brand created successfully", {"brand": brand})


@router.patch(
    "/brands/{brand_id}",
    response_model=Envelope[DashboardBrandData],
    summary="Update dashboard brand",
    responses={404: {"description": "Dashboard brand not found"}},
)
async def update_brand(
    brand_id: UUID,
    data: DashboardBrandUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    brand = DashboardContentService(db).update_brand(brand_id, data.model_dump(exclude_unset=True))
    return envelope("Dashboard brand updated successfully", {"brand": brand})


@router.delete(
    "/brands/{brand_id}",
    response_model=Envelope[Empty],
    summary="Delete dashboard brand",
    responses={404: {"description": "Dashboard brand not found"}},
)
async def delete_brand(
    brand_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    DashboardContentService(db).delete_brand(brand_id)
    return envelope("Dashboard brand deleted successfully")
