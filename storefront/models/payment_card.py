"""PaymentCard model - the vault of tokenized cards."""

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, text

from storefront.core.database import Base
from storefront.models.shared import (
    UUIDType,
    created_at_column,
    generate_uuid,
    updated_at_column,
)


class PaymentCard(Base):
    """A processor payment-method token saved for a user. Never holds the PAN."""

    __tablename__ = "payment_cards"
    __table_args__ = (
        # At most one default card per user
        Index(
            "uq_payment_cards_user_default",
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

    # Processor info
    processor_payment_method_id = Column(String(255), nullable=False)

    # Card snapshot taken from the processor at creation
    brand = Column(String(50), nullable=False)
    last4 = Column(String(4), nullable=False)
    exp_month = Column(Integer, nullable=False)
    exp_year = Column(Integer, nullable=False)
    cardholder_name = Column(String(255), nullable=False)
    country = Column(String(2), nullable=True)
    fingerprint = Column(String(255), nullable=True)

    is_default = Column(Boolean, nullable=False, default=False)

    created_at = created_at_column()
    updated_at = updated_at_column()
