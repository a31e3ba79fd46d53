"""Repository for Order and OrderItem data access."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from storefront.models.order import Order, OrderItem


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        user_id: UUID,
        skip: int = 0,
        limit: int = 100,
        statuses: tuple[str, ...] | None = None,
        newest_first_by: str = "created_at",
    ) -> list[Order]:
        query = self._for_user(user_id, statuses).options(selectinload(Order.order_items))
        column = getattr(Order, newest_first_by)
        return query.order_by(column.desc()).offset(skip).limit(limit).all()

    def count(self, user_id: UUID, statuses: tuple[str, ...] | None = None) -> int:
        return self._for_user(user_id, statuses).count()

    def get_by_id(self, order_id: UUID, user_id: UUID, refresh: bool = False) -> Order | None:
        query = self.db.query(Order).options(selectinload(Order.order_items))
        if refresh:
            # Overwrite any stale copy held by this session
            query = query.populate_existing()
        return (
            query.filter(Order.id == order_id, Order.user_id == user_id)
            .first()
        )

    def create(
        self, user_id: UUID, header: dict[str, Any], items: list[dict[str, Any]]
    ) -> Order:
        order = Order(user_id=user_id, **header)
        order.order_items = [OrderItem(**item) for item in items]
        self.db.add(order)
        self.db.flush()
        return order

    def update(self, order: Order, data: dict[str, Any]) -> Order:
        for key, value in data.items():
            setattr(order, key, value)
        self.db.flush()
        return order

    def delete(self, order: Order) -> None:
        self.db.delete(order)
        self.db.flush()

    def _for_user(self, user_id: UUID, statuses: tuple[str, ...] | None):  # type: ignore[no-untyped-def]
        query = self.db.query(Order).filter(Order.user_id == user_id)
        if statuses:
            query = query.filter(Order.status.in_(statuses))
        return query
