"""Repository for Address operations."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.models.address import Address


class AddressRepository:
    def __init__(self, db: Session):
        self.db = db

    def _ordered(self, user_id: UUID):  # type: ignore[no-untyped-def]
        return (
            self.db.query(Address)
            .filter(Address.user_id == user_id)
            .order_by(Address.is_default.desc(), Address.updated_at.desc())
        )

    def get_all(self, user_id: UUID, skip: int = 0, limit: int = 100) -> list[Address]:
        return self._ordered(user_id).offset(skip).limit(limit).all()

    def count(self, user_id: UUID) -> int:
        return self.db.query(Address).filter(Address.user_id == user_id).count()

    def get_by_id(
        self, address_id: UUID, user_id: UUID, refresh: bool = False
    ) -> Address | None:
        query = self.db.query(Address).filter(
            Address.id == address_id, Address.user_id == user_id
        )
        if refresh:
            query = query.populate_existing()
        return query.first()

    def get_default(self, user_id: UUID) -> Address | None:
        return (
            self.db.query(Address)
            .filter(Address.user_id == user_id, Address.is_default == True)  # noqa: E712
            .first()
        )

    def get_first(self, user_id: UUID) -> Address | None:
        """The address listed first, i.e. the default or the most recently updated."""
        return self._ordered(user_id).first()

    def find_duplicate(
        self, user_id: UUID, line1: str, line2: str | None, exclude_id: UUID | None = None
    ) -> Address | None:
        """Same ``line1`` and ``line2`` ignoring case. A missing ``line2`` matches only itself."""
        query = self.db.query(Address).filter(
            Address.user_id == user_id, func.lower(Address.line1) == line1.lower()
        )
        if line2 is None:
            query = query.filter(Address.line2.is_(None))
        else:
            query = query.filter(func.lower(Address.line2) == line2.lower())
        if exclude_id is not None:
            query = query.filter(Address.id != exclude_id)
        return query.first()

    def clear_defaults(self, user_id: UUID, except_id: UUID | None = None) -> int:
        query = self.db.query(Address).filter(
            Address.user_id == user_id,
            Address.is_default == True,  # noqa: E712
        )
        if except_id is not None:
            query = query.filter(Address.id != except_id)
        count = query.update({"is_default": False}, synchronize_session="fetch")
        self.db.flush()
        return int(count)

    def create(self, user_id: UUID, data: dict[str, Any]) -> Address:
        address = Address(user_id=user_id, **data)
        self.db.add(address)
        self.db.flush()
        return address

    def update(self, address: Address, data: dict[str, Any]) -> Address:
        for key, value in data.items():
            setattr(address, key, value)
        self.db.flush()
        return address

    def delete(self, address: Address) -> None:
        self.db.delete(address)
        self.db.flush()
