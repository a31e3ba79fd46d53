"""User model - the identity store."""

from sqlalchemy import Boolean, Column, String

from storefront.core.database import Base
from storefront.models.shared import (
    UUIDType,
    created_at_column,
    generate_uuid,
    updated_at_column,
)


class User(Base):
    """A shopper account. Soft-deleted by clearing ``is_active``."""

    __tablename__ = "users"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    display_name = Column(String(255), nullable=True)
    phone_number = Column(String(32), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)

    # Customer id at the payment processor, created lazily on first card/payment
    processor_customer_id = Column(String(255), nullable=True, unique=True)

    created_at = created_at_column()
    updated_at = updated_at_column()

    @property
    def full_name(self) -> str | None:
        if self.display_name:
            return str(self.display_name)
        parts = [p.strip() for p in (self.first_name, self.last_name) if p and p.strip()]
        return " ".join(parts) or None
