from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import func as sa_func
from sqlalchemy.orm import Session

from storefront.models.dashboard_content import DashboardBrand, DashboardOffer
from storefront.models.order import Order, OrderPaymentStatus
from storefront.models.product import Product, ProductVariant


@dataclass
class BestSeller:
    product_id: UUID
    product_name: str
    sku: str
    variant_name: str | None
    price: Decimal
    bought_count: int


@dataclass
class OrderTotals:
    order_count: int
    paid_order_count: int
    total_spent: Decimal


class DashboardRepository:
    def __init__(self, db: Session):
        self.db = db

    def _best_sellers_query(self):  # type: ignore[no-untyped-def]
        return (
            self.db.query(ProductVariant, Product)
            .join(Product, Product.id == ProductVariant.product_id)
            .filter(
                ProductVariant.is_active == True,  # noqa: E712
                Product.is_active == True,  # noqa: E712
            )
        )

    def best_sellers(self, skip: int = 0, limit: int = 10) -> list[BestSeller]:
        rows = (
            self._best_sellers_query()
            .order_by(ProductVariant.bought_count.desc(), ProductVariant.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return [
            BestSeller(
                product_id=product.id,
                product_name=product.name,
                sku=variant.sku,
                variant_name=variant.name,
                price=variant.price,
                bought_count=variant.bought_count,
            )
            for variant, product in rows
        ]

    def count_best_sellers(self) -> int:
        return self._best_sellers_query().count()

    def order_totals(self, user_id: UUID) -> OrderTotals:
        order_count = (
            self.db.query(sa_func.count(Order.id)).filter(Order.user_id == user_id).scalar() or 0
        )
        paid = (
            self.db.query(sa_func.count(Order.id), sa_func.sum(Order.total_amount))
            .filter(
                Order.user_id == user_id,
                Order.payment_status == OrderPaymentStatus.PAID.value,
            )
            .one()
        )
        return OrderTotals(
            order_count=int(order_count),
            paid_order_count=int(paid[0] or 0),
            total_spent=Decimal(str(paid[1] or 0)),
        )


class DashboardContentRepository:
    """Curated offers and brands shown on the dashboard."""

    def __init__(self, db: Session):
        self.db = db

    def _active_offers(self):  # type: ignore[no-untyped-def]
        return self.db.query(DashboardOffer).filter(DashboardOffer.is_active == True)  # noqa: E712

    def offers(self, skip: int = 0, limit: int = 10) -> list[DashboardOffer]:
        return (
            self._active_offers()
            .order_by(DashboardOffer.display_order.asc(), DashboardOffer.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_offers(self) -> int:
        return self._active_offers().count()

    def get_offer(self, offer_id: UUID) -> DashboardOffer | None:
        return self.db.query(DashboardOffer).filter(DashboardOffer.id == offer_id).first()

    def brands(self, skip: int = 0, limit: int = 10) -> list[DashboardBrand]:
        return (
            self.db.query(DashboardBrand)
            .order_by(DashboardBrand.display_order.asc(), DashboardBrand.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_brands(self) -> int:
        return self.db.query(DashboardBrand).count()

    def get_brand(self, brand_id: UUID) -> DashboardBrand | None:
        return self.db.query(DashboardBrand).filter(DashboardBrand.id == brand_id).first()

    def create(self, entry: DashboardOffer | DashboardBrand) -> Any:
        self.db.add(entry)
        self.db.flush()
        return entry

    def update(self, entry: DashboardOffer | DashboardBrand, data: dict[str, Any]) -> Any:
        for key, value in data.items():
            setattr(entry, key, value)
        self.db.flush()
        return entry

    def delete(self, entry: DashboardOffer | DashboardBrand) -> None:
        self.db.delete(entry)
        self.db.flush()
