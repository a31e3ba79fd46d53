"""Repositories for the catalog: the category tree, products and variants."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session, selectinload

from storefront.models.product import (
    Category,
    Product,
    ProductType,
    ProductVariant,
    Subcategory,
)


class CategoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def _filtered(  # type: ignore[no-untyped-def]
        self, search: str | None = None, include_inactive: bool = False
    ):
        query = self.db.query(Category)
        if not include_inactive:
            query = query.filter(Category.is_active == True)  # noqa: E712
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(Category.name.ilike(pattern), Category.description.ilike(pattern))
            )
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        search: str | None = None,
        include_inactive: bool = False,
    ) -> list[Category]:
        return (
            self._filtered(search, include_inactive)
            .order_by(Category.display_order.asc(), Category.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, search: str | None = None, include_inactive: bool = False) -> int:
        return self._filtered(search, include_inactive).count()

    def get_by_id(self, category_id: UUID) -> Category | None:
        return self.db.query(Category).filter(Category.id == category_id).first()

    def get_by_name(self, name: str) -> Category | None:
        return self.db.query(Category).filter(Category.name == name).first()

    def create(
        self, name: str, description: str | None = None, display_order: int = 0
    ) -> Category:
        category = Category(name=name, description=description, display_order=display_order)
        self.db.add(category)
        self.db.flush()
        return category


class SubcategoryRepository:
    def __init__(self, db: Session):
        self.db = db

    def _filtered(  # type: ignore[no-untyped-def]
        self,
        category_id: UUID | None = None,
        search: str | None = None,
        include_inactive: bool = False,
    ):
        query = self.db.query(Subcategory)
        if not include_inactive:
            query = query.filter(Subcategory.is_active == True)  # noqa: E712
        if category_id is not None:
            query = query.filter(Subcategory.category_id == category_id)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(Subcategory.name.ilike(pattern), Subcategory.description.ilike(pattern))
            )
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        category_id: UUID | None = None,
        search: str | None = None,
        include_inactive: bool = False,
    ) -> list[Subcategory]:
        return (
            self._filtered(category_id, search, include_inactive)
            .order_by(Subcategory.display_order.asc(), Subcategory.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(
        self,
        category_id: UUID | None = None,
        search: str | None = None,
        include_inactive: bool = False,
    ) -> int:
        return self._filtered(category_id, search, include_inactive).count()

    def get_by_id(self, subcategory_id: UUID) -> Subcategory | None:
        return self.db.query(Subcategory).filter(Subcategory.id == subcategory_id).first()

    def product_type_counts(self, subcategory_ids: list[UUID]) -> dict[UUID, int]:
        """Active product types per subcategory."""
        if not subcategory_ids:
            return {}
        rows = (
            self.db.query(ProductType.subcategory_id, func.count(ProductType.id))
            .filter(
                ProductType.subcategory_id.in_(subcategory_ids),
                ProductType.is_active == True,  # noqa: E712
            )
            .group_by(ProductType.subcategory_id)
            .all()
        )
        return {row[0]: int(row[1]) for row in rows}

    def create(self, data: dict[str, Any]) -> Subcategory:
        subcategory = Subcategory(**data)
        self.db.add(subcategory)
        self.db.flush()
        return subcategory

    def update(self, subcategory: Subcategory, data: dict[str, Any]) -> Subcategory:
        for key, value in data.items():
            setattr(subcategory, key, value)
        self.db.flush()
        return subcategory

    def delete(self, subcategory: Subcategory) -> None:
        """Delete with its product types. Products stay, detached from both levels."""
        type_ids = select(ProductType.id).where(ProductType.subcategory_id == subcategory.id)
        self.db.query(Product).filter(
            or_(
                Product.subcategory_id == subcategory.id,
                Product.product_type_id.in_(type_ids),
            )
        ).update(
            {"subcategory_id": None, "product_type_id": None}, synchronize_session="fetch"
        )
        self.db.query(ProductType).filter(ProductType.subcategory_id == subcategory.id).delete(
            synchronize_session="fetch"
        )
        self.db.delete(subcategory)
        self.db.flush()


class ProductTypeRepository:
    def __init__(self, db: Session):
        self.db = db

    def _filtered(  # type: ignore[no-untyped-def]
        self, subcategory_id: UUID | None = None, include_inactive: bool = False
    ):
        query = self.db.query(ProductType)
        if not include_inactive:
            query = query.filter(ProductType.is_active == True)  # noqa: E712
        if subcategory_id is not None:
            query = query.filter(ProductType.subcategory_id == subcategory_id)
        return query

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        subcategory_id: UUID | None = None,
        include_inactive: bool = False,
    ) -> list[ProductType]:
        return (
            self._filtered(subcategory_id, include_inactive)
            .order_by(ProductType.display_order.asc(), ProductType.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, subcategory_id: UUID | None = None, include_inactive: bool = False) -> int:
        return self._filtered(subcategory_id, include_inactive).count()

    def get_by_id(self, product_type_id: UUID) -> ProductType | None:
        return self.db.query(ProductType).filter(ProductType.id == product_type_id).first()

    def get_by_slug(self, slug: str) -> ProductType | None:
        return self.db.query(ProductType).filter(ProductType.slug == slug).first()

    def product_counts(self, product_type_ids: list[UUID]) -> dict[UUID, int]:
        """Products per product type, inactive ones included."""
        if not product_type_ids:
            return {}
        rows = (
            self.db.query(Product.product_type_id, func.count(Product.id))
            .filter(Product.product_type_id.in_(product_type_ids))
            .group_by(Product.product_type_id)
            .all()
        )
        return {row[0]: int(row[1]) for row in rows}

    def create(self, data: dict[str, Any]) -> ProductType:
        product_type = ProductType(**data)
        self.db.add(product_type)
        self.db.flush()
        return product_type

    def update(self, product_type: ProductType, data: dict[str, Any]) -> ProductType:
        for key, value in data.items():
            setattr(product_type, key, value)
        self.db.flush()
        return product_type

    def delete(self, product_type: ProductType) -> None:
        self.db.query(Product).filter(Product.product_type_id == product_type.id).update(
            {"product_type_id": None}, synchronize_session="fetch"
        )
        self.db.delete(product_type)
        self.db.flush()


@dataclass(frozen=True)
class ProductFilters:
    """Product listing filters.

    ``terms`` must each appear in the name, description or brand. Price, size
    and stock conditions must all hold for one active variant. A colour matches
    a variant colour or the product text.
    """

    category_id: UUID | None = None
    subcategory_id: UUID | None = None
    product_type_id: UUID | None = None
    terms: tuple[str, ...] = ()
    price_min: Decimal | None = None
    price_max: Decimal | None = None
    colors: tuple[str, ...] = ()
    sizes: tuple[str, ...] = ()
    in_stock: bool | None = None

    @property
    def needs_variant(self) -> bool:
        return bool(
            self.price_min is not None
            or self.price_max is not None
            or self.sizes
            or self.in_stock is not None
        )


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def _filtered(self, filters: ProductFilters):  # type: ignore[no-untyped-def]
        query = self.db.query(Product).filter(Product.is_active == True)  # noqa: E712
        if filters.category_id is not None:
            query = query.filter(Product.category_id == filters.category_id)
        if filters.subcategory_id is not None:
            query = query.filter(Product.subcategory_id == filters.subcategory_id)
        if filters.product_type_id is not None:
            query = query.filter(Product.product_type_id == filters.product_type_id)
        for term in filters.terms:
            query = query.filter(or_(*self._text_matches(term)))
        if filters.colors:
            variant_color = and_(
                ProductVariant.is_active == True,  # noqa: E712
                func.lower(ProductVariant.color).in_(filters.colors),
            )
            query = query.filter(
                or_(
                    Product.variants.any(variant_color),
                    *(match for color in filters.colors for match in self._text_matches(color)),
                )
            )
        if filters.needs_variant:
            query = query.filter(Product.variants.any(and_(*self._variant_conditions(filters))))
        return query

    @staticmethod
    def _text_matches(term: str) -> list[Any]:
        pattern = f"%{term}%"
        return [
            Product.name.ilike(pattern),
            Product.description.ilike(pattern),
            Product.brand.ilike(pattern),
        ]

    @staticmethod
    def _variant_conditions(filters: ProductFilters) -> list[Any]:
        conditions: list[Any] = [ProductVariant.is_active == True]  # noqa: E712
        effective_price = func.coalesce(ProductVariant.discounted_price, ProductVariant.price)
        if filters.price_min is not None:
            conditions.append(effective_price >= filters.price_min)
        if filters.price_max is not None:
            conditions.append(effective_price <= filters.price_max)
        if filters.sizes:
            conditions.append(func.lower(ProductVariant.size).in_(filters.sizes))
        if filters.in_stock is True:
            conditions.append(ProductVariant.stock > 0)
        elif filters.in_stock is False:
            conditions.append(ProductVariant.stock <= 0)
        return conditions

    def get_all(
        self, skip: int = 0, limit: int = 100, filters: ProductFilters | None = None
    ) -> list[Product]:
        return (
            self._filtered(filters or ProductFilters())
            .options(selectinload(Product.variants))
            .order_by(Product.display_order.asc(), Product.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, filters: ProductFilters | None = None) -> int:
        return self._filtered(filters or ProductFilters()).count()

    def get_by_id(self, product_id: UUID) -> Product | None:
        return (
            self.db.query(Product)
            .options(selectinload(Product.variants))
            .filter(Product.id == product_id)
            .first()
        )

    def create(self, product: Product) -> Product:
        self.db.add(product)
        self.db.flush()
        return product


class ProductVariantRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_sku(self, sku: str) -> ProductVariant | None:
        return self.db.query(ProductVariant).filter(ProductVariant.sku == sku).first()

    def get_existing_skus(self, skus: list[str]) -> set[str]:
        if not skus:
            return set()
        rows = self.db.query(ProductVariant.sku).filter(ProductVariant.sku.in_(skus)).all()
        return {row[0] for row in rows}

    def increment_bought_count(self, sku: str, amount: int) -> bool:
        """Add ``amount`` to a variant's bought count. Returns False if the SKU is gone."""
        updated = (
            self.db.query(ProductVariant)
            .filter(ProductVariant.sku == sku)
            .update(
                {ProductVariant.bought_count: ProductVariant.bought_count + amount},
                synchronize_session=False,
            )
        )
        return bool(updated)
