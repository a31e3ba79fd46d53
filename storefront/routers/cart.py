from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.auth import get_current_user
from storefront.core.database import get_db
from storefront.core.responses import envelope
from storefront.models.user import User
from storefront.schemas.cart import (
    CartClearData,
    CartItemCreate,
    CartItemData,
    CartItemUpdate,
    CartListData,
)
from storefront.schemas.common import Empty, Envelope
from storefront.services.cart_service import CartService

router = APIRouter()


@router.get("", response_model=Envelope[CartListData], summary="List cart lines")
async def list_cart(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    items, pagination = CartService(db).list(current_user.id, page, limit)  # type: ignore[arg-type]
    return envelope("Cart fetched successfully", {"carts": items, "pagination": pagination})


@router.post(
    "",
    response_model=Envelope[CartItemData],
    status_code=201,
    summary="Add to cart",
    responses={404: {"description": "Product or variant not found"}},
)
async def add_to_cart(
    data: CartItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    item = CartService(db).add(current_user.id, data)  # type: ignore[arg-type]
    return envelope("Item added to cart successfully", {"cart": item})


@router.delete("", response_model=Envelope[CartClearData], summary="Clear cart")
async def clear_cart(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    deleted = CartService(db).clear(current_user.id)  # type: ignore[arg-type]
    return envelope("Cart cleared successfully", {"deleted": deleted})


@router.patch(
    "/{item_id}",
    response_model=Envelope[CartItemData],
    summary="Update cart line",
    responses={404: {"description": "Cart item not found"}},
)
async def update_cart_item(
    item_id: UUID,
    data: CartItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    item = CartService(db).update(current_user.id, item_id, data)  # type: ignore[arg-type]
    return envelope("Cart updated successfully", {"cart": item})


@router.delete(
    "/{item_id}",
    response_model=Envelope[Empty],
    summary="Remove cart line",
    responses={404: {"description": "Cart item not found"}},
)
async def delete_cart_item(
    item_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    CartService(db).delete(current_user.id, item_id)  # type: ignore[arg-type]
    return envelope("Item removed from cart successfully")
