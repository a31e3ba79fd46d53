"""Categories and products."""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.database import atomic
from storefront.core.errors import ConflictError, NotFoundError
from storefront.core.pagination import build_pagination, normalize_pagination
from storefront.models.product import Category, Product, ProductVariant
from storefront.repositories.product_repository import (
    CategoryRepository,
    ProductFilters,
    ProductRepository,
    ProductVariantRepository,
)
from storefront.schemas.product import CategoryCreate, ProductCreate
from storefront.services.taxonomy_service import TaxonomyService

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self, db: Session):
        self.db = db
        self.categories = CategoryRepository(db)
        self.products = ProductRepository(db)
        self.variants = ProductVariantRepository(db)

    def list_categories(
        self, page: Any = None, limit: Any = None, search: str | None = None
    ) -> tuple[list[Category], dict[str, Any]]:
        request = normalize_pagination(page, limit)
        search = search.strip() if search and search.strip() else None
        total = self.categories.count(search)
        categories = self.categories.get_all(
            skip=request.offset, limit=request.limit, search=search
        )
        return categories, build_pagination(total, request.page, request.limit)

    def create_category(self, data: CategoryCreate) -> Category:
        name = data.name.strip()
        if self.categories.get_by_name(name) is not None:
            raise ConflictError(f"Category '{name}' already exists")
        with atomic(self.db):
            category = self.categories.create(
                name=name, description=data.description, display_order=data.display_order
            )
        return category

    def list_products(
        self,
        page: Any = None,
        limit: Any = None,
        category_id: UUID | None = None,
        search: str | None = None,
        subcategory_id: UUID | None = None,
        product_type_id: UUID | None = None,
    ) -> tuple[list[Product], dict[str, Any]]:
        request = normalize_pagination(page, limit)
        filters = ProductFilters(
            category_id=category_id,
            subcategory_id=subcategory_id,
            product_type_id=product_type_id,
            terms=(search.strip(),) if search and search.strip() else (),
        )
        total = self.products.count(filters)
        products = self.products.get_all(skip=request.offset, limit=request.limit, filters=filters)
        return products, build_pagination(total, request.page, request.limit)

    def get_product(self, product_id: UUID) -> Product:
        product = self.products.get_by_id(product_id)
        if product is None or not product.is_active:
            raise NotFoundError("Product not found")
        return product

    def create_product(self, data: ProductCreate) -> Product:
        TaxonomyService(self.db).require_placement(
            data.category_id, data.subcategory_id, data.product_type_id
        )

        skus = [variant.sku.strip() for variant in data.variants]
        duplicates = {sku for sku in skus if skus.count(sku) > 1}
        duplicates |= self.variants.get_existing_skus(skus)
        if duplicates:
            raise ConflictError(f"SKU already exists: {', '.join(sorted(duplicates))}")

        product = Product(
            category_id=data.category_id,
            subcategory_id=data.subcategory_id,
            product_type_id=data.product_type_id,
            name=data.name,
            description=data.description,
            brand=data.brand,
            base_price=data.base_price,
            display_order=data.display_order,
        )
        product.variants = [
            ProductVariant(**variant.model_dump(exclude={"sku"}), sku=variant.sku.strip())
            for variant in data.variants
        ]
        try:
            with atomic(self.db):
                self.products.create(product)
        except IntegrityError as e:
            raise ConflictError("SKU already exists") from e

        logger.info("Created product %s with %d variant(s)", product.id, len(product.variants))
        return product
