"""Catalog models: the category tree, products and their variants."""

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from storefront.core.database import Base
from storefront.models.shared import (
    UUIDType,
    created_at_column,
    generate_uuid,
    updated_at_column,
)


class Category(Base):
    __tablename__ = "categories"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = created_at_column()
    updated_at = updated_at_column()


class Subcategory(Base):
    __tablename__ = "subcategories"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    category_id = Column(
        UUIDType, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(1024), nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = created_at_column()
    updated_at = updated_at_column()


class ProductType(Base):
    """Third catalog level under a subcategory, e.g. "Running shoes"."""

    __tablename__ = "product_types"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    subcategory_id = Column(
        UUIDType, ForeignKey("subcategories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    image_url = Column(String(1024), nullable=True)
    # Facet definitions shown next to listings of this type
    filters = Column(JSON, nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = created_at_column()
    updated_at = updated_at_column()


class Product(Base):
    __tablename__ = "products"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    category_id = Column(
        UUIDType, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    subcategory_id = Column(
        UUIDType, ForeignKey("subcategories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    product_type_id = Column(
        UUIDType, ForeignKey("product_types.id", ondelete="SET NULL"), nullable=True, index=True
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    brand = Column(String(255), nullable=True)
    base_price = Column(Numeric(12, 2), nullable=False)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    variants = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductVariant.created_at",
    )


class ProductVariant(Base):
    __tablename__ = "product_variants"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    product_id = Column(
        UUIDType, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sku = Column(String(128), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    discounted_price = Column(Numeric(12, 2), nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    color = Column(String(64), nullable=True)
    size = Column(String(64), nullable=True)
    bought_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = created_at_column()
    updated_at = updated_at_column()

    product = relationship("Product", back_populates="variants")
