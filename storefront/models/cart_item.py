"""CartItem model - a line in a user's cart."""

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String

from storefront.core.database import Base
from storefront.models.shared import (
    UUIDType,
    created_at_column,
    generate_uuid,
    updated_at_column,
)


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(
        UUIDType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(
        UUIDType, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_variant_sku = Column(String(128), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    # Line total, not unit price
    price = Column(Numeric(12, 2), nullable=False)
    created_at = created_at_column()
    updated_at = updated_at_column()
