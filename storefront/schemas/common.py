"""Response envelope and pagination schemas shared by every router."""

from typing import Generic, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """Uniform success envelope: ``{message, data}``."""

    message: str
    data: DataT


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class Empty(BaseModel):
    pass
