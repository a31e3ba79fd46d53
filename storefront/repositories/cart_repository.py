"""Repository for CartItem operations."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.models.cart_item import CartItem


class CartRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self, user_id: UUID, skip: int = 0, limit: int = 100) -> list[CartItem]:
        return (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id)
            .order_by(CartItem.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, user_id: UUID) -> int:
        return self.db.query(CartItem).filter(CartItem.user_id == user_id).count()

    def get_by_id(self, cart_item_id: UUID, user_id: UUID) -> CartItem | None:
        return (
            self.db.query(CartItem)
            .filter(CartItem.id == cart_item_id, CartItem.user_id == user_id)
            .first()
        )

    def find_line(
        self, user_id: UUID, product_id: UUID, variant_sku: str | None
    ) -> CartItem | None:
        query = self.db.query(CartItem).filter(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        if variant_sku is None:
            query = query.filter(CartItem.product_variant_sku.is_(None))
        else:
            query = query.filter(CartItem.product_variant_sku == variant_sku)
        return query.first()

    def create(self, **fields: Any) -> CartItem:
        item = CartItem(**fields)
        self.db.add(item)
        self.db.flush()
        return item

    def update(self, item: CartItem, data: dict[str, Any]) -> CartItem:
        for key, value in data.items():
            setattr(item, key, value)
        self.db.flush()
        return item

    def delete(self, item: CartItem) -> None:
        self.db.delete(item)
        self.db.flush()

    def clear(self, user_id: UUID) -> int:
        count = (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id)
            .delete(synchronize_session=False)
        )
        return int(count)
