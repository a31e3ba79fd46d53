"""Lenient page/limit parsing shared by every paginated listing."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from storefront.core.config import settings


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _positive_int(value: Any, fallback: int) -> int:
    if value is None or isinstance(value, bool):
        return fallback
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(parsed) or parsed < 1:
        return fallback
    return int(parsed)


def normalize_pagination(page: Any = None, limit: Any = None) -> PageRequest:
    """Parse raw ``page``/``limit`` values.

    Missing, non-numeric or non-positive values fall back to the configured
    defaults. ``limit`` is clamped to ``MAX_LIMIT`` and ``page`` to ``MAX_PAGE``.
    """
    parsed_limit = min(_positive_int(limit, settings.DEFAULT_LIMIT), settings.MAX_LIMIT)
    parsed_page = min(_positive_int(page, settings.DEFAULT_PAGE), settings.MAX_PAGE)
    return PageRequest(page=parsed_page, limit=parsed_limit)


def build_pagination(total: int, page: int, limit: int) -> dict[str, Any]:
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": total_pages,
        "has_next_page": page < total_pages,
        "has_prev_page": page > 1,
    }
