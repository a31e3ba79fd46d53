from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.auth import get_current_user
from storefront.core.database import get_db
from storefront.core.responses import envelope
from storefront.models.user import User
from storefront.schemas.common import Empty, Envelope
from storefront.schemas.order import OrderCreate, OrderData, OrderListData, OrderUpdate
from storefront.services.order_service import OrderService

router = APIRouter()


@router.get("", response_model=Envelope[OrderListData], summary="List my orders")
async def list_orders(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    service = OrderService(db)
    orders, pagination = service.list(current_user.id, page, limit)  # type: ignore[arg-type]
    return envelope("Orders fetched successfully", {"orders": orders, "pagination": pagination})


@router.post(
    "",
    response_model=Envelope[OrderData],
    status_code=201,
    summary="Create order",
    responses={422: {"description": "Validation error"}},
)
async def create_order(
    data: OrderCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    order = OrderService(db).create(current_user.id, data)  # type: ignore[arg-type]
    return envelope("Order created successfully", {"order": order})


@router.get(
    "/{order_id}",
    response_model=Envelope[OrderData],
    summary="Get order",
    responses={404: {"description": "Order not found"}},
)
async def get_order(
    order_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    order = OrderService(db).get(current_user.id, order_id)  # type: ignore[arg-type]
    return envelope("Order fetched successfully", {"order": order})


@router.patch(
    "/{order_id}",
    response_model=Envelope[OrderData],
    summary="Update order status or rating",
    responses={404: {"description": "Order not found"}},
)
async def update_order(
    order_id: UUID,
    data: OrderUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    order = OrderService(db).update(current_user.id, order_id, data)  # type: ignore[arg-type]
    return envelope("Order updated successfully", {"order": order})


@router.delete(
    "/{order_id}",
    response_model=Envelope[Empty],
    summary="Delete an unpaid order",
    responses={
        400: {"description": "Order is already paid"},
        404: {"description": "Order not found"},
    },
)
async def delete_order(
    order_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    OrderService(db).delete(current_user.id, order_id)  # type: ignore[arg-type]
    return envelope("Order deleted successfully")
