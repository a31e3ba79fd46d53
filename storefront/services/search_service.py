"""Global search across categories, subcategories and products.

The free-text query may carry hints that become product filters:

- prices such as ``under 2k``, ``above ₹500`` or ``rs 500 to 1500``
  (``k`` and ``m`` multiply by a thousand and a million);
- colour words such as ``red`` or ``navy``;
- sizes such as ``xl``, ``medium`` or ``size 9``.

Explicit ``price_min`` / ``price_max`` parameters win over inferred prices.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.core.errors import ValidationError
from storefront.core.pagination import PageRequest
from storefront.repositories.product_repository import (
    CategoryRepository,
    ProductFilters,
    ProductRepository,
)
from storefront.schemas.product import CategoryResponse, ProductResponse
from storefront.services.sections import (
    build_section,
    parse_sections,
    section_page,
    total_item_count,
)
from storefront.services.taxonomy_service import TaxonomyService

SECTION_KEYS = ("categories", "subcategories", "products")

SEARCH_TERM_PARAMS = ("q", "query", "term", "search")

_PRICE = re.compile(
    r"(?<![\w.])(?<!size\s)(?:₹\s*|\brs\.?\s*)?(\d+(?:\.\d+)?)\s*([km])?(?!\w)", re.IGNORECASE
)
_PRICE_MIN_HINTS = re.compile(
    r"\b(?:over|above|greater than|from|at least|minimum|more than|starting at)\b"
)
_PRICE_MAX_HINTS = re.compile(r"\b(?:under|below|less than|up to|upto|within|no more than|max)\b")
# Words that only join the price parts of a query
_PRICE_CONNECTORS = re.compile(r"\b(?:between|and|to)\b|(?<!\w)-(?!\w)")
_MULTIPLIERS = {"k": Decimal(1000), "m": Decimal(1_000_000)}

_EXPLICIT_SIZE = re.compile(r"\bsize\s*(\d+(?:\.\d+)?)\b", re.IGNORECASE)

COLOR_KEYWORDS = frozenset(
    """
    black white red blue green grey gray yellow orange purple pink brown navy
    maroon teal olive beige peach mint lavender coral turquoise magenta amber
    gold silver bronze cream ivory chocolate charcoal rose mustard eggplant
    emerald ruby wine lime aqua cyan
    """.split()
)
SIZE_TERMS = frozenset(
    "xs s m l xl xxl xxxl small medium large onesize one-size os".split()
)
# Single letters are too ambiguous unless the query is clearly about sizing
_SHORT_SIZE_TERMS = frozenset({"s", "m", "l", "os"})
SIZE_INDICATOR_WORDS = frozenset(
    """
    size shoe shoes footwear clothes apparel pant pants trouser trousers shirt
    shirts tshirt dress sneaker sneakers boots boot jacket jeans shorts skirt
    sweater sock socks sandals slipper slippers heels coat coats top tops
    outerwear hoodie
    """.split()
)

_TOKEN = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")


@dataclass(frozen=True)
class PriceRange:
    text: str
    price_min: Decimal | None = None
    price_max: Decimal | None = None


@dataclass(frozen=True)
class Attributes:
    terms: tuple[str, ...]
    colors: tuple[str, ...] = ()
    sizes: tuple[str, ...] = ()


def extract_search_term(query: Mapping[str, Any]) -> str:
    for name in SEARCH_TERM_PARAMS:
        value = query.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    raise ValidationError("Search term is required")


def extract_price_range(text: str) -> PriceRange:
    """Pull price hints out of ``text``.

    Two prices give a range. A single price is a ceiling when only a
    ceiling hint (``under``, ``below``, ...) is present, otherwise a floor.
    """
    values = [_price_value(match) for match in _PRICE.finditer(text)]
    if not values:
        return PriceRange(text=text)

    lowered = text.lower()
    price_min = price_max = None
    if len(values) >= 2:
        price_min, price_max = sorted(values[:2])
    elif _PRICE_MAX_HINTS.search(lowered) and not _PRICE_MIN_HINTS.search(lowered):
        price_max = values[0]
    else:
        price_min = values[0]

    remainder = _PRICE.sub(" ", lowered)
    remainder = _PRICE_MIN_HINTS.sub(" ", remainder)
    remainder = _PRICE_MAX_HINTS.sub(" ", remainder)
    remainder = _PRICE_CONNECTORS.sub(" ", remainder)
    return PriceRange(text=" ".join(remainder.split()), price_min=price_min, price_max=price_max)


def _price_value(match: re.Match[str]) -> Decimal:
    value = Decimal(match.group(1))
    unit = (match.group(2) or "").lower()
    return value * _MULTIPLIERS.get(unit, Decimal(1))


def _singular(token: str) -> str:
    """``shirts`` -> ``shirt`` so plural queries match singular names."""
    if len(token) > 3 and token.endswith("s") and not token.endswith("ss"):
        return token[:-1]
    return token


def extract_attributes(text: str) -> Attributes:
    """Split ``text`` into colour words, sizes and the remaining search terms."""
    lowered = text.lower()
    sizes = [match.group(1) for match in _EXPLICIT_SIZE.finditer(lowered)]
    tokens = _TOKEN.findall(_EXPLICIT_SIZE.sub(" ", lowered))
    sizing = bool(sizes) or any(token in SIZE_INDICATOR_WORDS for token in tokens)

    terms: list[str] = []
    colors: list[str] = []
    for token in tokens:
        if token in COLOR_KEYWORDS:
            colors.append(token)
        elif token in SIZE_TERMS and (sizing or token not in _SHORT_SIZE_TERMS):
            sizes.append(token)
        elif token != "size":
            terms.append(_singular(token))
    return Attributes(
        terms=tuple(dict.fromkeys(terms)),
        colors=tuple(dict.fromkeys(colors)),
        sizes=tuple(dict.fromkeys(sizes)),
    )


def parse_bool(value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _parse_uuid(query: Mapping[str, Any], name: str) -> UUID | None:
    raw = query.get(name)
    if raw is None or not str(raw).strip():
        return None
    try:
        return UUID(str(raw).strip())
    except ValueError as e:
        raise ValidationError(f"{name} must be a valid UUID") from e


def _parse_price(query: Mapping[str, Any], *names: str) -> Decimal | None:
    raw = next((query.get(name) for name in names if query.get(name) not in (None, "")), None)
    if raw is None:
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation as e:
        raise ValidationError(f"{names[0]} must be a number") from e
    if not value.is_finite() or value < 0:
        raise ValidationError(f"{names[0]} must be a non-negative number")
    return value


def _first_set(*values: Decimal | None) -> Decimal | None:
    return next((value for value in values if value is not None), None)


class SearchService:
    def __init__(self, db: Session):
        self.db = db
        self.categories = CategoryRepository(db)
        self.products = ProductRepository(db)

    def search(self, query: Mapping[str, Any]) -> dict[str, Any]:
        term = extract_search_term(query)
        price = extract_price_range(term)
        attributes = extract_attributes(price.text)
        # Category names rarely contain prices; fall back to the raw text
        text = price.text or term

        include_inactive = parse_bool(query.get("include_inactive")) or False
        category_id = _parse_uuid(query, "category_id")
        filters = ProductFilters(
            category_id=category_id,
            subcategory_id=_parse_uuid(query, "subcategory_id"),
            product_type_id=_parse_uuid(query, "product_type_id"),
            terms=attributes.terms,
            price_min=_first_set(_parse_price(query, "price_min", "min_price"), price.price_min),
            price_max=_first_set(_parse_price(query, "price_max", "max_price"), price.price_max),
            colors=attributes.colors,
            sizes=attributes.sizes,
            in_stock=parse_bool(query.get("in_stock")),
        )
        if (
            filters.price_min is not None
            and filters.price_max is not None
            and filters.price_min > filters.price_max
        ):
            raise ValidationError("price_min must not exceed price_max")

        fetchers = {
            "categories": lambda page: self._categories(text, include_inactive, page),
            "subcategories": lambda page: self._subcategories(
                text, category_id, include_inactive, page
            ),
            "products": lambda page: self._products(filters, page),
        }
        names = parse_sections(query.get("sections"), SECTION_KEYS) or list(SECTION_KEYS)
        sections = {name: fetchers[name](section_page(query, name)) for name in names}
        return {
            "sections": sections,
            "meta": {
                "total_item_count": total_item_count(sections),
                "filters": {
                    "terms": list(filters.terms),
                    "price_min": filters.price_min,
                    "price_max": filters.price_max,
                    "colors": list(filters.colors),
                    "sizes": list(filters.sizes),
                },
            },
        }

    def _categories(self, text: str, include_inactive: bool, page: PageRequest) -> dict[str, Any]:
        total = self.categories.count(search=text, include_inactive=include_inactive)
        rows = self.categories.get_all(
            skip=page.offset, limit=page.limit, search=text, include_inactive=include_inactive
        )
        return build_section(
            [CategoryResponse.model_validate(row).model_dump(mode="json") for row in rows],
            total,
            page,
        )

    def _subcategories(
        self,
        text: str,
        category_id: UUID | None,
        include_inactive: bool,
        page: PageRequest,
    ) -> dict[str, Any]:
        rows, pagination = TaxonomyService(self.db).list_subcategories(
            page.page, page.limit, category_id, text, include_inactive
        )
        return {
            "items": [row.model_dump(mode="json") for row in rows],
            "pagination": pagination,
        }

    def _products(self, filters: ProductFilters, page: PageRequest) -> dict[str, Any]:
        total = self.products.count(filters)
        rows = self.products.get_all(skip=page.offset, limit=page.limit, filters=filters)
        return build_section(
            [ProductResponse.model_validate(row).model_dump(mode="json") for row in rows],
            total,
            page,
        )
