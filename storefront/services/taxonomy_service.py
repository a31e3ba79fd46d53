"""Subcategories and product types: the catalog levels below a category."""

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.database import atomic
from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.core.pagination import build_pagination, normalize_pagination
from storefront.models.product import ProductType, Subcategory
from storefront.repositories.product_repository import (
    CategoryRepository,
    ProductTypeRepository,
    SubcategoryRepository,
)
from storefront.schemas.product import (
    ProductTypeCreate,
    ProductTypeResponse,
    SubcategoryCreate,
    SubcategoryResponse,
)

logger = logging.getLogger(__name__)

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    return _SLUG_SEPARATORS.sub("-", value.strip().lower()).strip("-")


def _changes(data: dict[str, Any], nullable: tuple[str, ...]) -> dict[str, Any]:
    """Fields to write from a partial update. Only ``nullable`` fields may be cleared."""
    changes = {key: value for key, value in data.items() if value is not None or key in nullable}
    if not changes:
        raise ValidationError("Nothing to update")
    return changes


class TaxonomyService:
    def __init__(self, db: Session):
        self.db = db
        self.categories = CategoryRepository(db)
        self.subcategories = SubcategoryRepository(db)
        self.product_types = ProductTypeRepository(db)

    # Subcategories

    def list_subcategories(
        self,
        page: Any = None,
        limit: Any = None,
        category_id: UUID | None = None,
        search: str | None = None,
        include_inactive: bool = False,
    ) -> tuple[list[SubcategoryResponse], dict[str, Any]]:
        """Subcategories in ``display_order``, each with its active product type count."""
        request = normalize_pagination(page, limit)
        filters = {
            "category_id": category_id,
            "search": search,
            "include_inactive": include_inactive,
        }
        total = self.subcategories.count(**filters)
        rows = self.subcategories.get_all(skip=request.offset, limit=request.limit, **filters)
        return self.describe_subcategories(rows), build_pagination(
            total, request.page, request.limit
        )

    def describe_subcategories(self, rows: list[Subcategory]) -> list[SubcategoryResponse]:
        counts = self.subcategories.product_type_counts([row.id for row in rows])  # type: ignore[arg-type]
        return [
            SubcategoryResponse.model_validate(row).model_copy(
                update={"product_type_count": counts.get(row.id, 0)}
            )
            for row in rows
        ]

    def get_subcategory(self, subcategory_id: UUID) -> SubcategoryResponse:
        return self.describe_subcategories([self._subcategory(subcategory_id)])[0]

    def create_subcategory(self, data: SubcategoryCreate) -> SubcategoryResponse:
        self._require_category(data.category_id)
        with atomic(self.db):
            subcategory = self.subcategories.create(
                {**data.model_dump(), "name": data.name.strip()}
            )
        logger.info("Created subcategory %s under category %s", subcategory.id, data.category_id)
        return self.describe_subcategories([subcategory])[0]

    def update_subcategory(
        self, subcategory_id: UUID, data: dict[str, Any]
    ) -> SubcategoryResponse:
        subcategory = self._subcategory(subcategory_id)
        update_data = _changes(data, nullable=("description", "image_url"))
        if "category_id" in update_data:
            self._require_category(update_data["category_id"])
        if "name" in update_data:
            update_data["name"] = update_data["name"].strip()
        with atomic(self.db):
            self.subcategories.update(subcategory, update_data)
        return self.describe_subcategories([subcategory])[0]

    def delete_subcategory(self, subcategory_id: UUID) -> None:
        subcategory = self._subcategory(subcategory_id)
        with atomic(self.db):
            self.subcategories.delete(subcategory)
        logger.info("Deleted subcategory %s", subcategory_id)

    # Product types

    def list_product_types(
        self,
        page: Any = None,
        limit: Any = None,
        subcategory_id: UUID | None = None,
        include_inactive: bool = False,
    ) -> tuple[list[ProductTypeResponse], dict[str, Any]]:
        request = normalize_pagination(page, limit)
        if subcategory_id is not None:
            self._subcategory(subcategory_id)
        total = self.product_types.count(subcategory_id, include_inactive)
        rows = self.product_types.get_all(
            skip=request.offset,
            limit=request.limit,
            subcategory_id=subcategory_id,
            include_inactive=include_inactive,
        )
        return self.describe_product_types(rows), build_pagination(
            total, request.page, request.limit
        )

    def describe_product_types(self, rows: list[ProductType]) -> list[ProductTypeResponse]:
        counts = self.product_types.product_counts([row.id for row in rows])  # type: ignore[arg-type]
        return [
            ProductTypeResponse.model_validate(row).model_copy(
                update={"product_count": counts.get(row.id, 0)}
            )
            for row in rows
        ]

    def get_product_type(self, product_type_id: UUID) -> ProductTypeResponse:
        return self.describe_product_types([self._product_type(product_type_id)])[0]

    def create_product_type(self, data: ProductTypeCreate) -> ProductTypeResponse:
        self._subcategory(data.subcategory_id)
        fields = data.model_dump()
        fields["name"] = data.name.strip()
        fields["slug"] = self._slug(data.slug or data.name)
        with self._slug_transaction():
            product_type = self.product_types.create(fields)
        logger.info(
            "Created product type %s under subcategory %s", product_type.id, data.subcategory_id
        )
        return self.describe_product_types([product_type])[0]

    def update_product_type(
        self, product_type_id: UUID, data: dict[str, Any]
    ) -> ProductTypeResponse:
        product_type = self._product_type(product_type_id)
        update_data = _changes(data, nullable=("description", "image_url", "filters"))
        if "subcategory_id" in update_data:
            self._subcategory(update_data["subcategory_id"])
        if "name" in update_data:
            update_data["name"] = update_data["name"].strip()
        if "slug" in update_data:
            update_data["slug"] = self._slug(
                update_data["slug"], exclude_id=product_type.id  # type: ignore[arg-type]
            )
        with self._slug_transaction():
            self.product_types.update(product_type, update_data)
        return self.describe_product_types([product_type])[0]

    def delete_product_type(self, product_type_id: UUID) -> None:
        product_type = self._product_type(product_type_id)
        with atomic(self.db):
            self.product_types.delete(product_type)
        logger.info("Deleted product type %s", product_type_id)

    # Lookups

    def require_placement(
        self,
        category_id: UUID | None,
        subcategory_id: UUID | None,
        product_type_id: UUID | None,
    ) -> None:
        """Check that a product's category, subcategory and product type exist and nest."""
        if category_id is not None:
            self._require_category(category_id)
        if subcategory_id is not None:
            subcategory = self._subcategory(subcategory_id)
            if category_id is not None and subcategory.category_id != category_id:
                raise ValidationError("Subcategory does not belong to the category")
        if product_type_id is not None:
            product_type = self._product_type(product_type_id)
            if subcategory_id is not None and product_type.subcategory_id != subcategory_id:
                raise ValidationError("Product type does not belong to the subcategory")

    def _require_category(self, category_id: UUID) -> None:
        if self.categories.get_by_id(category_id) is None:
            raise NotFoundError("Category not found")

    def _subcategory(self, subcategory_id: UUID) -> Subcategory:
        subcategory = self.subcategories.get_by_id(subcategory_id)
        if subcategory is None:
            raise NotFoundError("Subcategory not found")
        return subcategory

    def _product_type(self, product_type_id: UUID) -> ProductType:
        product_type = self.product_types.get_by_id(product_type_id)
        if product_type is None:
            raise NotFoundError("Product type not found")
        return product_type

    def _slug(self, raw: str, exclude_id: UUID | None = None) -> str:
        slug = slugify(raw)
        if not slug:
            raise ValidationError("Slug must contain letters or digits")
        existing = self.product_types.get_by_slug(slug)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(f"Product type slug '{slug}' already exists")
        return slug

    @contextmanager
    def _slug_transaction(self) -> Iterator[None]:
        try:
            with atomic(self.db):
                yield
        except IntegrityError as e:
            raise ConflictError("Product type slug already exists") from e
