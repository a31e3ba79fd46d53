"""Order creation and management."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.core.database import atomic
from storefront.core.errors import NotFoundError, ValidationError
from storefront.core.pagination import build_pagination, normalize_pagination
from storefront.models.order import (
    TRACKABLE_STATUSES,
    Order,
    OrderPaymentStatus,
    OrderStatus,
)
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import ProductVariantRepository
from storefront.schemas.order import OrderCreate, OrderItemCreate, OrderUpdate

logger = logging.getLogger(__name__)

# Keys checked, in order, when a snapshot carries the chosen variant
_SNAPSHOT_SKU_KEYS = ("variantSku", "productVariantSku", "sku")
_NESTED_SKU_KEYS = ("productVariant", "selectedVariant", "variant")
_INFO_SKU_KEYS = ("sku", "variantSku")
_INFO_NESTED_KEYS = ("productVariant", "selectedVariant")


def _clean_sku(value: Any) -> str | None:
    if value is None:
        return None
    sku = str(value).strip()
    return sku or None


def _first_sku(
    data: dict[str, Any], keys: tuple[str, ...], nested: tuple[str, ...]
) -> str | None:
    for key in keys:
        sku = _clean_sku(data.get(key))
        if sku:
            return sku
    for key in nested:
        inner = data.get(key)
        if isinstance(inner, dict):
            sku = _clean_sku(inner.get("sku"))
            if sku:
                return sku
    return None


def sku_from_variant_info(variant_info: Any) -> str | None:
    """Read a SKU from ``variant_info``: a plain SKU, a dict or a JSON object."""
    if variant_info is None:
        return None
    if isinstance(variant_info, dict):
        return _first_sku(variant_info, _INFO_SKU_KEYS, _INFO_NESTED_KEYS)
    text = str(variant_info).strip()
    if not text:
        return None
    try:
        parsed = json.loads(text)
    except ValueError:
        return text
    if isinstance(parsed, dict):
        return _first_sku(parsed, _INFO_SKU_KEYS, _INFO_NESTED_KEYS)
    return text


def resolve_variant_sku(item: OrderItemCreate) -> str | None:
    sku = sku_from_variant_info(item.variant_info)
    if sku:
        return sku
    snapshot = item.product_snapshot
    if isinstance(snapshot, dict):
        return _first_sku(snapshot, _SNAPSHOT_SKU_KEYS, _NESTED_SKU_KEYS)
    return None


def _variant_info_text(variant_info: Any) -> str | None:
    if variant_info is None:
        return None
    if isinstance(variant_info, dict):
        return json.dumps(variant_info, sort_keys=True)
    return str(variant_info)


class OrderService:
    def __init__(self, db: Session):
        self.db = db
        self.orders = OrderRepository(db)
        self.variants = ProductVariantRepository(db)

    def list(
        self, user_id: UUID, page: Any = None, limit: Any = None
    ) -> tuple[list[Order], dict[str, Any]]:
        request = normalize_pagination(page, limit)
        total = self.orders.count(user_id)
        orders = self.orders.get_all(user_id, skip=request.offset, limit=request.limit)
        return orders, build_pagination(total, request.page, request.limit)

    def list_trackable(
        self, user_id: UUID, page: Any = None, limit: Any = None
    ) -> tuple[list[Order], dict[str, Any]]:
        request = normalize_pagination(page, limit)
        total = self.orders.count(user_id, statuses=TRACKABLE_STATUSES)
        orders = self.orders.get_all(
            user_id,
            skip=request.offset,
            limit=request.limit,
            statuses=TRACKABLE_STATUSES,
            newest_first_by="updated_at",
        )
        return orders, build_pagination(total, request.page, request.limit)

    def get(self, user_id: UUID, order_id: UUID) -> Order:
        order = self.orders.get_by_id(order_id, user_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def create(self, user_id: UUID, data: OrderCreate) -> Order:
        items = [self._item_fields(item) for item in data.items]
        computed_total = sum((item["subtotal"] for item in items), Decimal("0"))
        total_amount = data.total_amount if data.total_amount is not None else computed_total

        header = {
            "total_amount": total_amount,
            "shipping_address": data.shipping_address,
            "promocode": data.promocode or None,
            "status": (data.status or OrderStatus.PENDING).value,
            "payment_status": OrderPaymentStatus.PENDING.value,
            "payment_method": data.payment_method,
            "rating": data.rating.value if data.rating else None,
        }

        with atomic(self.db):
            order = self.orders.create(user_id, header, items)
            self._increment_bought_counts(data.items)

        logger.info(
            "Created order %s for user %s with %d item(s)", order.id, user_id, len(items)
        )
        return order

    def update(self, user_id: UUID, order_id: UUID, data: OrderUpdate) -> Order:
        """Change status and/or rating. Payment status only moves through capture."""
        order = self.get(user_id, order_id)
        update_data: dict[str, Any] = {}
        if data.status is not None:
            update_data["status"] = data.status.value
        if data.rating is not None:
            update_data["rating"] = data.rating.value
        if not update_data:
            raise ValidationError("Nothing to update")
        with atomic(self.db):
            self.orders.update(order, update_data)
        return order

    def delete(self, user_id: UUID, order_id: UUID) -> None:
        order = self.get(user_id, order_id)
        if order.payment_status == OrderPaymentStatus.PAID.value:
            raise ValidationError("Paid orders cannot be deleted", 400)
        with atomic(self.db):
            self.orders.delete(order)

    def _item_fields(self, item: OrderItemCreate) -> dict[str, Any]:
        subtotal = item.subtotal if item.subtotal is not None else item.price * item.quantity
        return {
            "product_id": item.product_id,
            "product_snapshot": item.product_snapshot,
            "quantity": item.quantity,
            "price": item.price,
            "subtotal": subtotal,
            "variant_info": _variant_info_text(item.variant_info),
        }

    def _increment_bought_counts(self, items: list[OrderItemCreate]) -> None:
        """Bump ``bought_count`` per SKU. Unknown SKUs are skipped, not fatal."""
        increments: dict[str, int] = {}
        for item in items:
            sku = resolve_variant_sku(item)
            if sku:
                increments[sku] = increments.get(sku, 0) + item.quantity

        for sku, amount in increments.items():
            if not self.variants.increment_bought_count(sku, amount):
                logger.warning("Skipping bought count for unknown variant SKU %s", sku)
