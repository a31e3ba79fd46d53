from decimal import Decimal

from pydantic import BaseModel, Field

from storefront.schemas.dashboard import DashboardSection


class AppliedFilters(BaseModel):
    """Filters the products section ran with, after reading hints from the query."""

    terms: list[str] = Field(default_factory=list)
    price_min: Decimal | None = None
    price_max: Decimal | None = None
    colors: list[str] = Field(default_factory=list)
    sizes: list[str] = Field(default_factory=list)


class SearchMeta(BaseModel):
    total_item_count: int
    filters: AppliedFilters


class SearchData(BaseModel):
    sections: dict[str, DashboardSection]
    meta: SearchMeta
