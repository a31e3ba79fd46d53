"""Curated dashboard content: promotional offers and featured brands."""

from sqlalchemy import Boolean, Column, Integer, String, Text

from storefront.core.database import Base
from storefront.models.shared import (
    UUIDType,
    created_at_column,
    generate_uuid,
    updated_at_column,
)


class DashboardOffer(Base):
    __tablename__ = "dashboard_offers"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    subtitle = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    discount_label = Column(String(64), nullable=True)
    action_label = Column(String(64), nullable=True)
    target_url = Column(String(1024), nullable=True)
    image_url = Column(String(1024), nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = created_at_column()
    updated_at = updated_at_column()


class DashboardBrand(Base):
    __tablename__ = "dashboard_brands"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    tagline = Column(String(255), nullable=True)
    logo_url = Column(String(1024), nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    display_order = Column(Integer, nullable=False, default=0)
    created_at = created_at_column()
    updated_at = updated_at_column()
