"""Shopping cart lines."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.core.database import atomic
from storefront.core.errors import NotFoundError, ValidationError
from storefront.core.pagination import build_pagination, normalize_pagination
from storefront.models.cart_item import CartItem
from storefront.repositories.cart_repository import CartRepository
from storefront.repositories.product_repository import (
    ProductRepository,
    ProductVariantRepository,
)
from storefront.schemas.cart import CartItemCreate, CartItemUpdate

CENT = Decimal("0.01")


class CartService:
    def __init__(self, db: Session):
        self.db = db
        self.cart = CartRepository(db)
        self.products = ProductRepository(db)
        self.variants = ProductVariantRepository(db)

    def list(
        self, user_id: UUID, page: Any = None, limit: Any = None
    ) -> tuple[list[CartItem], dict[str, Any]]:
        request = normalize_pagination(page, limit)
        total = self.cart.count(user_id)
        items = self.cart.get_all(user_id, skip=request.offset, limit=request.limit)
        return items, build_pagination(total, request.page, request.limit)

    def add(self, user_id: UUID, data: CartItemCreate) -> CartItem:
        """Add a line, merging into an existing line for the same product and SKU."""
        if self.products.get_by_id(data.product_id) is None:
            raise NotFoundError("Product not found")
        sku = self._check_sku(data.product_id, data.product_variant_sku)

        existing = self.cart.find_line(user_id, data.product_id, sku)
        with atomic(self.db):
            if existing is None:
                item = self.cart.create(
                    user_id=user_id,
                    product_id=data.product_id,
                    product_variant_sku=sku,
                    quantity=data.quantity,
                    price=data.price,
                )
            else:
                quantity = int(existing.quantity) + data.quantity
                price = self._line_price(existing, quantity) or data.price
                item = self.cart.update(existing, {"quantity": quantity, "price": price})
        return item

    def update(self, user_id: UUID, item_id: UUID, data: CartItemUpdate) -> CartItem:
        item = self._get(user_id, item_id)
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_data:
            raise ValidationError("Nothing to update")
        if "product_variant_sku" in update_data:
            update_data["product_variant_sku"] = self._check_sku(
                item.product_id, update_data["product_variant_sku"]  # type: ignore[arg-type]
            )
        if "price" not in update_data and update_data.get("quantity", 0) > int(item.quantity):
            price = self._line_price(item, update_data["quantity"])
            if price is not None:
                update_data["price"] = price
        with atomic(self.db):
            self.cart.update(item, update_data)
        return item

    def delete(self, user_id: UUID, item_id: UUID) -> None:
        item = self._get(user_id, item_id)
        with atomic(self.db):
            self.cart.delete(item)

    def clear(self, user_id: UUID) -> int:
        with atomic(self.db):
            count = self.cart.clear(user_id)
        return count

    def _get(self, user_id: UUID, item_id: UUID) -> CartItem:
        item = self.cart.get_by_id(item_id, user_id)
        if item is None:
            raise NotFoundError("Cart item not found")
        return item

    def _check_sku(self, product_id: UUID, sku: str | None) -> str | None:
        if sku is None or not sku.strip():
            return None
        variant = self.variants.get_by_sku(sku.strip())
        if variant is None or variant.product_id != product_id:
            raise NotFoundError("Product variant not found")
        return str(variant.sku)

    def _line_price(self, item: CartItem, quantity: int) -> Decimal | None:
        """Line total at the variant price, else at the line's current unit price."""
        unit_price: Decimal | None = None
        if item.product_variant_sku:
            variant = self.variants.get_by_sku(str(item.product_variant_sku))
            if variant is not None and variant.price is not None:
                unit_price = Decimal(str(variant.price))
        if unit_price is None and item.quantity and item.price is not None:
            unit_price = Decimal(str(item.price)) / int(item.quantity)
        if unit_price is None:
            return None
        return (unit_price * quantity).quantize(CENT, rounding=ROUND_HALF_UP)
