"""Helpers for endpoints that return several independently paged sections."""

from collections.abc import Iterable, Mapping
from typing import Any

from storefront.core.pagination import PageRequest, build_pagination, normalize_pagination


def parse_sections(raw: str | None, keys: Iterable[str]) -> list[str]:
    """Requested section names in request order.

    Unknown names are dropped; a missing or blank value selects every key.
    """
    keys = list(keys)
    requested = [value.strip() for value in (raw or "").split(",") if value.strip()]
    if not requested:
        return keys
    return [value for value in dict.fromkeys(requested) if value in keys]


def section_page(query: Mapping[str, Any], prefix: str) -> PageRequest:
    """``<prefix>_page`` / ``<prefix>_limit`` with the shared ``page`` / ``limit`` as fallback."""
    return normalize_pagination(
        query.get(f"{prefix}_page", query.get("page")),
        query.get(f"{prefix}_limit", query.get("limit")),
    )


def build_section(items: list[Any], total: int, page: PageRequest) -> dict[str, Any]:
    return {"items": items, "pagination": build_pagination(total, page.page, page.limit)}


def total_item_count(sections: Mapping[str, dict[str, Any]]) -> int:
    return sum(section["pagination"]["total"] for section in sections.values())
