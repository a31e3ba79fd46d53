"""Repositories for wishlists and their items."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from storefront.models.wishlist import Wishlist, WishlistItem


class WishlistRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self, user_id: UUID, skip: int = 0, limit: int = 100) -> list[Wishlist]:
        return (
            self.db.query(Wishlist)
            .options(selectinload(Wishlist.items).selectinload(WishlistItem.product))
            .filter(Wishlist.user_id == user_id)
            .order_by(Wishlist.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, user_id: UUID) -> int:
        return self.db.query(Wishlist).filter(Wishlist.user_id == user_id).count()

    def get_by_id(
        self, wishlist_id: UUID, user_id: UUID, refresh: bool = False
    ) -> Wishlist | None:
        query = self.db.query(Wishlist).filter(
            Wishlist.id == wishlist_id, Wishlist.user_id == user_id
        )
        if refresh:
            query = query.populate_existing()
        return query.first()

    def clear_defaults(self, user_id: UUID, except_id: UUID | None = None) -> int:
        query = self.db.query(Wishlist).filter(
            Wishlist.user_id == user_id,
            Wishlist.is_default == True,  # noqa: E712
        )
        if except_id is not None:
            query = query.filter(Wishlist.id != except_id)
        count = query.update({"is_default": False}, synchronize_session="fetch")
        self.db.flush()
        return int(count)

    def create(self, user_id: UUID, data: dict[str, Any]) -> Wishlist:
        wishlist = Wishlist(user_id=user_id, **data)
        self.db.add(wishlist)
        self.db.flush()
        return wishlist

    def update(self, wishlist: Wishlist, data: dict[str, Any]) -> Wishlist:
        for key, value in data.items():
            setattr(wishlist, key, value)
        self.db.flush()
        return wishlist

    def delete(self, wishlist: Wishlist) -> None:
        self.db.delete(wishlist)
        self.db.flush()


class WishlistItemRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self, wishlist_id: UUID, skip: int = 0, limit: int = 100) -> list[WishlistItem]:
        return (
            self.db.query(WishlistItem)
            .options(selectinload(WishlistItem.product))
            .filter(WishlistItem.wishlist_id == wishlist_id)
            .order_by(WishlistItem.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, wishlist_id: UUID) -> int:
        return (
            self.db.query(WishlistItem).filter(WishlistItem.wishlist_id == wishlist_id).count()
        )

    def get_by_id(self, item_id: UUID, wishlist_id: UUID) -> WishlistItem | None:
        return (
            self.db.query(WishlistItem)
            .filter(WishlistItem.id == item_id, WishlistItem.wishlist_id == wishlist_id)
            .first()
        )

    def get_by_product(self, wishlist_id: UUID, product_id: UUID) -> WishlistItem | None:
        return (
            self.db.query(WishlistItem)
            .filter(
                WishlistItem.wishlist_id == wishlist_id,
                WishlistItem.product_id == product_id,
            )
            .first()
        )

    def create(self, wishlist_id: UUID, product_id: UUID) -> WishlistItem:
        item = WishlistItem(wishlist_id=wishlist_id, product_id=product_id)
        self.db.add(item)
        self.db.flush()
        return item

    def delete(self, item: WishlistItem) -> None:
        self.db.delete(item)
        self.db.flush()
