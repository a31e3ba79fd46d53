"""Address book: saved shipping addresses with at most one default per user."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.core.database import atomic
from storefront.core.errors import ConflictError, NotFoundError, ValidationError
from storefront.core.pagination import build_pagination, normalize_pagination
from storefront.models.address import Address
from storefront.repositories.address_repository import AddressRepository
from storefront.repositories.user_repository import UserRepository
from storefront.schemas.address import AddressCreate

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Address already exists"


class AddressService:
    def __init__(self, db: Session):
        self.db = db
        self.addresses = AddressRepository(db)
        self.users = UserRepository(db)

    def list(
        self, user_id: UUID, page: Any = None, limit: Any = None
    ) -> tuple[list[Address], dict[str, Any]]:
        request = normalize_pagination(page, limit)
        total = self.addresses.count(user_id)
        addresses = self.addresses.get_all(user_id, skip=request.offset, limit=request.limit)
        return addresses, build_pagination(total, request.page, request.limit)

    def get(self, user_id: UUID, address_id: UUID) -> Address:
        address = self.addresses.get_by_id(address_id, user_id)
        if address is None:
            raise NotFoundError("Address not found")
        return address

    def get_default(self, user_id: UUID) -> Address | None:
        return self.addresses.get_default(user_id)

    def create(self, user_id: UUID, data: AddressCreate) -> Address:
        """The first address of a user always becomes the default."""
        fields = data.model_dump()
        with self._address_transaction(user_id):
            if self.addresses.find_duplicate(user_id, data.line1, data.line2) is not None:
                raise ConflictError(DUPLICATE_MESSAGE)
            if self.addresses.count(user_id) == 0:
                fields["is_default"] = True
            elif fields["is_default"]:
                self.addresses.clear_defaults(user_id)
            address = self.addresses.create(user_id, fields)
        logger.info("Saved address %s for user %s", address.id, user_id)
        return address

    def update(self, user_id: UUID, address_id: UUID, data: dict[str, Any]) -> Address:
        """Partial update. ``is_default: true`` moves the default here; ``false`` only unsets it."""
        changes = {
            key: value
            for key, value in data.items()
            if value is not None or key in ("line2", "building_name")
        }
        if not changes:
            raise ValidationError("Nothing to update")
        with self._address_transaction(user_id):
            address = self.addresses.get_by_id(address_id, user_id, refresh=True)
            if address is None:
                raise NotFoundError("Address not found")
            if "line1" in changes or "line2" in changes:
                duplicate = self.addresses.find_duplicate(
                    user_id,
                    changes.get("line1", address.line1),
                    changes.get("line2", address.line2),
                    exclude_id=address.id,  # type: ignore[arg-type]
                )
                if duplicate is not None:
                    raise ConflictError(DUPLICATE_MESSAGE)
            if changes.get("is_default") and not address.is_default:
                self.addresses.clear_defaults(user_id, except_id=address.id)  # type: ignore[arg-type]
            self.addresses.update(address, changes)
        return address

    def delete(self, user_id: UUID, address_id: UUID) -> Address:
        """Deleting the default promotes the address listed first among the rest."""
        with self._address_transaction(user_id):
            address = self.addresses.get_by_id(address_id, user_id, refresh=True)
            if address is None:
                raise NotFoundError("Address not found")
            was_default = bool(address.is_default)
            self.addresses.delete(address)
            if was_default:
                successor = self.addresses.get_first(user_id)
                if successor is not None:
                    self.addresses.update(successor, {"is_default": True})
                    logger.info(
                        "Promoted address %s to default for user %s", successor.id, user_id
                    )
        return address

    @contextmanager
    def _address_transaction(self, user_id: UUID) -> Iterator[None]:
        try:
            with atomic(self.db):
                self.users.lock(user_id)
                yield
        except IntegrityError as e:
            raise ConflictError("Default address changed concurrently, retry") from e
