"""Pydantic schemas for the address book."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.models.address import DEFAULT_COUNTRY
from storefront.schemas.common import PaginationMeta

AddressType = Literal["home", "work"]
ZIP_CODE_PATTERN = r"^\d{6}$"


def _lower(value: Any) -> Any:
    return value.strip().lower() if isinstance(value, str) else value


class AddressCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    line1: str = Field(..., min_length=1, max_length=255)
    line2: str | None = Field(default=None, max_length=255)
    building_name: str | None = Field(default=None, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., pattern=ZIP_CODE_PATTERN)
    country: str = Field(default=DEFAULT_COUNTRY, min_length=1, max_length=100)
    address_type: AddressType = "home"
    is_default: bool = False

    @field_validator("address_type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        return _lower(value)

    @field_validator("line2", "building_name")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        return value or None


class AddressUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    line1: str | None = Field(default=None, min_length=1, max_length=255)
    line2: str | None = Field(default=None, max_length=255)
    building_name: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, min_length=1, max_length=100)
    state: str | None = Field(default=None, min_length=1, max_length=100)
    zip_code: str | None = Field(default=None, pattern=ZIP_CODE_PATTERN)
    country: str | None = Field(default=None, min_length=1, max_length=100)
    address_type: AddressType | None = None
    is_default: bool | None = None

    @field_validator("address_type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        return _lower(value)

    @field_validator("line2", "building_name")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        return value or None


class AddressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    line1: str
    line2: str | None = None
    building_name: str | None = None
    city: str
    state: str
    zip_code: str
    country: str
    address_type: str
    is_default: bool
    created_at: datetime
    updated_at: datetime


class AddressListData(BaseModel):
    addresses: list[AddressResponse]
    pagination: PaginationMeta


class AddressData(BaseModel):
    address: AddressResponse | None = None
