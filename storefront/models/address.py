"""Address model - a user's saved shipping addresses."""

from sqlalchemy import Boolean, Column, ForeignKey, Index, String, text

from storefront.core.database import Base
from storefront.models.shared import (
    UUIDType,
    created_at_column,
    generate_uuid,
    updated_at_column,
)

ADDRESS_TYPES = ("home", "work")
DEFAULT_COUNTRY = "India"


class Address(Base):
    __tablename__ = "addresses"
    __table_args__ = (
        # At most one default address per user
        Index(
            "uq_addresses_user_default",
            "user_id",
            unique=True,
            postgresql_where=text("is_default"),
            sqlite_where=text("is_default"),
        ),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(
        UUIDType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    line1 = Column(String(255), nullable=False)
    line2 = Column(String(255), nullable=True)
    building_name = Column(String(255), nullable=True)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    zip_code = Column(String(6), nullable=False)
    country = Column(String(100), nullable=False, default=DEFAULT_COUNTRY)
    address_type = Column(String(10), nullable=False, default="home")
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = created_at_column()
    updated_at = updated_at_column()
