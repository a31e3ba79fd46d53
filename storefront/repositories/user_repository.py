"""Repository for User data access."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from storefront.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: UUID, active_only: bool = False) -> User | None:
        query = self.db.query(User).filter(User.id == user_id)
        if active_only:
            query = query.filter(User.is_active == True)  # noqa: E712
        return query.first()

    def get_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def lock(self, user_id: UUID) -> User | None:
        """Lock the user row for the rest of the transaction.

        Serializes per-user mutations such as default-card swaps.
        """
        return self.db.query(User).filter(User.id == user_id).with_for_update().first()

    def create(
        self,
        *,
        email: str,
        password_hash: str,
        first_name: str | None = None,
        last_name: str | None = None,
        display_name: str | None = None,
        phone_number: str | None = None,
    ) -> User:
        user = User(
            email=email.strip().lower(),
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            display_name=display_name,
            phone_number=phone_number,
        )
        self.db.add(user)
        self.db.flush()
        return user

    def update(self, user: User, data: dict[str, Any]) -> User:
        for key, value in data.items():
            setattr(user, key, value)
        self.db.flush()
        return user

    def set_processor_customer_id(self, user: User, customer_id: str) -> User:
        user.processor_customer_id = customer_id  # type: ignore[assignment]
        self.db.flush()
        return user

    def deactivate(self, user: User) -> User:
        user.is_active = False  # type: ignore[assignment]
        self.db.flush()
        return user
