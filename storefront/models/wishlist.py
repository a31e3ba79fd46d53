"""Wishlist models - named product lists with at most one default per user."""

from sqlalchemy import Boolean, Column, ForeignKey, Index, String, UniqueConstraint, text
from sqlalchemy.orm import relationship

from storefront.core.database import Base
from storefront.models.shared import (
    UUIDType,
    created_at_column,
    generate_uuid,
    updated_at_column,
)


class Wishlist(Base):
    __tablename__ = "wishlists"
    __table_args__ = (
        Index(
            "uq_wishlists_user_default",
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
    name = Column(String(255), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = created_at_column()
    updated_at = updated_at_column()

    items = relationship(
        "WishlistItem",
        back_populates="wishlist",
        cascade="all, delete-orphan",
        order_by="WishlistItem.created_at.desc()",
    )


class WishlistItem(Base):
    __tablename__ = "wishlist_items"
    __table_args__ = (
        UniqueConstraint("wishlist_id", "product_id", name="uq_wishlist_items_product"),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    wishlist_id = Column(
        UUIDType, ForeignKey("wishlists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(
        UUIDType, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = created_at_column()

    wishlist = relationship("Wishlist", back_populates="items")
    product = relationship("Product")
