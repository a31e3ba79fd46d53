"""Wishlists: named lists of products, at most one of them the default."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.database import atomic
from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.core.pagination import build_pagination, normalize_pagination
from storefront.models.wishlist import Wishlist, WishlistItem
from storefront.repositories.product_repository import ProductRepository
from storefront.repositories.user_repository import UserRepository
from storefront.repositories.wishlist_repository import (
    WishlistItemRepository,
    WishlistRepository,
)
from storefront.schemas.wishlist import WishlistCreate

logger = logging.getLogger(__name__)


class WishlistService:
    def __init__(self, db: Session):
        self.db = db
        self.wishlists = WishlistRepository(db)
        self.items = WishlistItemRepository(db)
        self.products = ProductRepository(db)
        self.users = UserRepository(db)

    def list(
        self, user_id: UUID, page: Any = None, limit: Any = None
    ) -> tuple[list[Wishlist], dict[str, Any]]:
        """Newest first, each with its items."""
        request = normalize_pagination(page, limit)
        total = self.wishlists.count(user_id)
        wishlists = self.wishlists.get_all(user_id, skip=request.offset, limit=request.limit)
        return wishlists, build_pagination(total, request.page, request.limit)

    def get(self, user_id: UUID, wishlist_id: UUID) -> Wishlist:
        wishlist = self.wishlists.get_by_id(wishlist_id, user_id)
        if wishlist is None:
            raise NotFoundError("Wishlist not found")
        return wishlist

    def create(self, user_id: UUID, data: WishlistCreate) -> Wishlist:
        with self._wishlist_transaction(user_id):
            if data.is_default:
                self.wishlists.clear_defaults(user_id)
            wishlist = self.wishlists.create(
                user_id, {"name": data.name.strip(), "is_default": data.is_default}
            )
        logger.info("Created wishlist %s for user %s", wishlist.id, user_id)
        return wishlist

    def update(self, user_id: UUID, wishlist_id: UUID, data: dict[str, Any]) -> Wishlist:
        changes = {key: value for key, value in data.items() if value is not None}
        if not changes:
            raise ValidationError("Nothing to update")
        if "name" in changes:
            changes["name"] = changes["name"].strip()
        with self._wishlist_transaction(user_id):
            wishlist = self.wishlists.get_by_id(wishlist_id, user_id, refresh=True)
            if wishlist is None:
                raise NotFoundError("Wishlist not found")
            if changes.get("is_default") and not wishlist.is_default:
                self.wishlists.clear_defaults(user_id, except_id=wishlist.id)  # type: ignore[arg-type]
            self.wishlists.update(wishlist, changes)
        return wishlist

    def delete(self, user_id: UUID, wishlist_id: UUID) -> None:
        wishlist = self.get(user_id, wishlist_id)
        with atomic(self.db):
            self.wishlists.delete(wishlist)
        logger.info("Deleted wishlist %s for user %s", wishlist_id, user_id)

    def list_items(
        self, user_id: UUID, wishlist_id: UUID, page: Any = None, limit: Any = None
    ) -> tuple[list[WishlistItem], dict[str, Any]]:
        self.get(user_id, wishlist_id)
        request = normalize_pagination(page, limit)
        total = self.items.count(wishlist_id)
        items = self.items.get_all(wishlist_id, skip=request.offset, limit=request.limit)
        return items, build_pagination(total, request.page, request.limit)

    def add_item(self, user_id: UUID, wishlist_id: UUID, product_id: UUID) -> WishlistItem:
        self.get(user_id, wishlist_id)
        product = self.products.get_by_id(product_id)
        if product is None or not product.is_active:
            raise NotFoundError("Product not found")
        if self.items.get_by_product(wishlist_id, product_id) is not None:
            raise ConflictError("Product is already in the wishlist")
        try:
            with atomic(self.db):
                item = self.items.create(wishlist_id, product_id)
        except IntegrityError as e:
            raise ConflictError("Product is already in the wishlist") from e
        return item

    def remove_item(self, user_id: UUID, wishlist_id: UUID, item_id: UUID) -> None:
        self.get(user_id, wishlist_id)
        item = self.items.get_by_id(item_id, wishlist_id)
        if item is None:
            raise NotFoundError("Wishlist item not found")
        with atomic(self.db):
            self.items.delete(item)

    @contextmanager
    def _wishlist_transaction(self, user_id: UUID) -> Iterator[None]:
        try:
            with atomic(self.db):
                self.users.lock(user_id)
                yield
        except IntegrityError as e:
            raise ConflictError("Default wishlist changed concurrently, retry") from e
