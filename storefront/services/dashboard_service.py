"""Composite home dashboard built from independent sections."""

import logging
from collections.abc import Callable, Mapping
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.core.database import atomic
from storefront.core.errors import NotFoundError, ValidationError
from storefront.core.pagination import PageRequest
from storefront.models.dashboard_content import DashboardBrand, DashboardOffer
from storefront.models.order import TRACKABLE_STATUSES
from storefront.repositories.dashboard_repository import (
    DashboardContentRepository,
    DashboardRepository,
)
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import CategoryRepository
from storefront.schemas.dashboard import (
    BestSellerItem,
    DashboardBrandCreate,
    DashboardBrandResponse,
    DashboardOfferCreate,
    DashboardOfferResponse,
)
from storefront.schemas.order import OrderResponse
from storefront.schemas.product import CategoryResponse
from storefront.services.sections import (
    build_section,
    parse_sections,
    section_page,
    total_item_count,
)

logger = logging.getLogger(__name__)

SECTION_KEYS = (
    "offers",
    "categories",
    "previous_orders",
    "track_orders",
    "products",
    "brands",
)

# Query-string prefix for per-section paging, e.g. ``orders_page``
SECTION_PREFIXES = {
    "offers": "offers",
    "categories": "categories",
    "previous_orders": "orders",
    "track_orders": "tracking",
    "products": "products",
    "brands": "brands",
}

OFFER_NOT_NULL = ("title", "display_order", "is_active")
BRAND_NOT_NULL = ("name", "display_order", "is_featured")


def _changes(data: dict[str, Any], not_null: tuple[str, ...]) -> dict[str, Any]:
    """Fields to write from a partial update. Fields outside ``not_null`` may be cleared."""
    changes = {
        key: value for key, value in data.items() if value is not None or key not in not_null
    }
    if not changes:
        raise ValidationError("Nothing to update")
    return changes


class DashboardService:
    def __init__(self, db: Session):
        self.db = db
        self.dashboard = DashboardRepository(db)
        self.content = DashboardContentRepository(db)
        self.orders = OrderRepository(db)
        self.categories = CategoryRepository(db)

    def build(self, user_id: UUID, query: Mapping[str, Any]) -> dict[str, Any]:
        fetchers: dict[str, Callable[[UUID, PageRequest], dict[str, Any]]] = {
            "offers": self._offers,
            "categories": self._categories,
            "previous_orders": self._previous_orders,
            "track_orders": self._track_orders,
            "products": self._products,
            "brands": self._brands,
        }
        sections = {
            name: fetchers[name](user_id, section_page(query, SECTION_PREFIXES[name]))
            for name in parse_sections(query.get("sections"), SECTION_KEYS)
        }
        totals = self.dashboard.order_totals(user_id)
        return {
            "summary": {
                "order_count": totals.order_count,
                "paid_order_count": totals.paid_order_count,
                "total_spent": totals.total_spent,
            },
            "sections": sections,
            "meta": {"total_item_count": total_item_count(sections)},
        }

    def _offers(self, user_id: UUID, page: PageRequest) -> dict[str, Any]:
        total = self.content.count_offers()
        offers = self.content.offers(skip=page.offset, limit=page.limit)
        return build_section(
            [DashboardOfferResponse.model_validate(o).model_dump(mode="json") for o in offers],
            total,
            page,
        )

    def _previous_orders(self, user_id: UUID, page: PageRequest) -> dict[str, Any]:
        total = self.orders.count(user_id)
        orders = self.orders.get_all(user_id, skip=page.offset, limit=page.limit)
        return build_section(
            [OrderResponse.model_validate(o).model_dump(mode="json") for o in orders],
            total,
            page,
        )

    def _track_orders(self, user_id: UUID, page: PageRequest) -> dict[str, Any]:
        total = self.orders.count(user_id, statuses=TRACKABLE_STATUSES)
        orders = self.orders.get_all(
            user_id,
            skip=page.offset,
            limit=page.limit,
            statuses=TRACKABLE_STATUSES,
            newest_first_by="updated_at",
        )
        return build_section(
            [OrderResponse.model_validate(o).model_dump(mode="json") for o in orders],
            total,
            page,
        )

    def _products(self, user_id: UUID, page: PageRequest) -> dict[str, Any]:
        total = self.dashboard.count_best_sellers()
        rows = self.dashboard.best_sellers(skip=page.offset, limit=page.limit)
        return build_section(
            [
                BestSellerItem.model_validate(r, from_attributes=True).model_dump(mode="json")
                for r in rows
            ],
            total,
            page,
        )

    def _categories(self, user_id: UUID, page: PageRequest) -> dict[str, Any]:
        total = self.categories.count()
        categories = self.categories.get_all(skip=page.offset, limit=page.limit)
        return build_section(
            [CategoryResponse.model_validate(c).model_dump(mode="json") for c in categories],
            total,
            page,
        )

    def _brands(self, user_id: UUID, page: PageRequest) -> dict[str, Any]:
        total = self.content.count_brands()
        brands = self.content.brands(skip=page.offset, limit=page.limit)
        return build_section(
            [DashboardBrandResponse.model_validate(b).model_dump(mode="json") for b in brands],
            total,
            page,
        )


class DashboardContentService:
    """Create, edit and remove the curated offers and brands."""

    def __init__(self, db: Session):
        self.db = db
        self.content = DashboardContentRepository(db)

    def create_offer(self, data: DashboardOfferCreate) -> DashboardOffer:
        with atomic(self.db):
            offer = self.content.create(DashboardOffer(**data.model_dump()))
        logger.info("Created dashboard offer %s", offer.id)
        return offer

    def update_offer(self, offer_id: UUID, data: dict[str, Any]) -> DashboardOffer:
        offer = self.content.get_offer(offer_id)
        if offer is None:
            raise NotFoundError("Dashboard offer not found")
        with atomic(self.db):
            self.content.update(offer, _changes(data, OFFER_NOT_NULL))
        return offer

    def delete_offer(self, offer_id: UUID) -> None:
        offer = self.content.get_offer(offer_id)
        if offer is None:
            raise NotFoundError("Dashboard offer not found")
        with atomic(self.db):
            self.content.delete(offer)
        logger.info("Deleted dashboard offer %s", offer_id)

    def create_brand(self, data: DashboardBrandCreate) -> DashboardBrand:
        with atomic(self.db):
            brand = self.content.create(DashboardBrand(**data.model_dump()))
        logger.info("Created dashboard brand %s", brand.id)
        return brand

    def update_brand(self, brand_id: UUID, data: dict[str, Any]) -> DashboardBrand:
        brand = self.content.get_brand(brand_id)
        if brand is None:
            raise NotFoundError("Dashboard brand not found")
        with atomic(self.db):
            self.content.update(brand, _changes(data, BRAND_NOT_NULL))
        return brand

    def delete_brand(self, brand_id: UUID) -> None:
        brand = self.content.get_brand(brand_id)
        if brand is None:
            raise NotFoundError("Dashboard brand not found")
        with atomic(self.db):
            self.content.delete(brand)
        logger.info("Deleted dashboard brand %s", brand_id)
