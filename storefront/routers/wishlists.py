from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.core.auth import get_current_user
from storefront.core.database import get_db
from storefront.core.responses import envelope
from storefront.models.user import User
from storefront.schemas.common import Empty, Envelope
from storefront.schemas.wishlist import (
    WishlistCreate,
    WishlistData,
    WishlistItemCreate,
    WishlistItemData,
    WishlistItemListData,
    WishlistListData,
    WishlistUpdate,
)
from storefront.services.wishlist_service import WishlistService

router = APIRouter()


@router.get("", response_model=Envelope[WishlistListData], summary="List wishlists")
async def list_wishlists(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    wishlists, pagination = WishlistService(db).list(current_user.id, page, limit)  # type: ignore[arg-type]
    return envelope(
        "Wishlists fetched successfully", {"wishlists": wishlists, "pagination": pagination}
    )


@router.post("", response_model=Envelope[WishlistData], status_code=201, summary="Create wishlist")
async def create_wishlist(
    data: WishlistCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    wishlist = WishlistService(db).create(current_user.id, data)  # type: ignore[arg-type]
    return envelope("Wishlist created successfully", {"wishlist": wishlist})


@router.get(
    "/{wishlist_id}",
    response_model=Envelope[WishlistData],
    summary="Get wishlist",
    responses={404: {"description": "Wishlist not found"}},
)
async def get_wishlist(
    wishlist_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    wishlist = WishlistService(db).get(current_user.id, wishlist_id)  # type: ignore[arg-type]
    return envelope("Wishlist fetched successfully", {"wishlist": wishlist})


@router.patch(
    "/{wishlist_id}",
    response_model=Envelope[WishlistData],
    summary="Rename or make default",
    responses={404: {"description": "Wishlist not found"}},
)
async def update_wishlist(
    wishlist_id: UUID,
    data: WishlistUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    wishlist = WishlistService(db).update(
        current_user.id,  # type: ignore[arg-type]
        wishlist_id,
        data.model_dump(exclude_unset=True),
    )
    return envelope("Wishlist updated successfully", {"wishlist": wishlist})


@router.delete(
    "/{wishlist_id}",
    response_model=Envelope[Empty],
    summary="Delete wishlist",
    responses={404: {"description": "Wishlist not found"}},
)
async def delete_wishlist(
    wishlist_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    WishlistService(db).delete(current_user.id, wishlist_id)  # type: ignore[arg-type]
    return envelope("Wishlist deleted successfully")


@router.get(
    "/{wishlist_id}/items",
    response_model=Envelope[WishlistItemListData],
    summary="List wishlist items",
    responses={404: {"description": "Wishlist not found"}},
)
async def list_wishlist_items(
    wishlist_id: UUID,
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    """Most recently added first."""
    items, pagination = WishlistService(db).list_items(
        current_user.id, wishlist_id, page, limit  # type: ignore[arg-type]
    )
    return envelope(
        "Wishlist items fetched successfully", {"items": items, "pagination": pagination}
    )


@router.post(
    "/{wishlist_id}/items",
    response_model=Envelope[WishlistItemData],
    status_code=201,
    summary="Add product to wishlist",
    responses={
        404: {"description": "Wishlist or product not found"},
        409: {"description": "Product is already in the wishlist"},
    },
)
async def add_wishlist_item(
    wishlist_id: UUID,
    data: WishlistItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    item = WishlistService(db).add_item(
        current_user.id, wishlist_id, data.product_id  # type: ignore[arg-type]
    )
    return envelope("Product added to wishlist", {"item": item})


@router.delete(
    "/{wishlist_id}/items/{item_id}",
    response_model=Envelope[Empty],
    summary="Remove product from wishlist",
    responses={404: {"description": "Wishlist item not found"}},
)
async def remove_wishlist_item(
    wishlist_id: UUID,
    item_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    WishlistService(db).remove_item(current_user.id, wishlist_id, item_id)  # type: ignore[arg-type]
    return envelope("Product removed from wishlist")
