"""Order aggregate: order header plus its items."""

from enum import Enum

from sqlalchemy import JSON, Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from storefront.core.database import Base
from storefront.models.shared import (
    UUIDType,
    created_at_column,
    generate_uuid,
    updated_at_column,
)


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class OrderPaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class OrderRating(str, Enum):
    VERY_BAD = "VERY_BAD"
    BAD = "BAD"
    GOOD = "GOOD"
    VERY_GOOD = "VERY_GOOD"


# Orders a customer can still follow on the dashboard
TRACKABLE_STATUSES = (
    OrderStatus.PENDING.value,
    OrderStatus.CONFIRMED.value,
    OrderStatus.PROCESSING.value,
    OrderStatus.SHIPPED.value,
)


class Order(Base):
    __tablename__ = "orders"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(
        UUIDType, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    total_amount = Column(Numeric(12, 2), nullable=False)

    # Snapshot of the address at checkout time
    shipping_address = Column(JSON, nullable=False, default=dict)
    promocode = Column(String(255), nullable=True)

    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)
    payment_status = Column(String(20), nullable=False, default=OrderPaymentStatus.PENDING.value)
    payment_method = Column(String(255), nullable=False)
    rating = Column(String(20), nullable=True)

    created_at = created_at_column()
    updated_at = updated_at_column()

    order_items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.created_at",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    order_id = Column(
        UUIDType, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(
        UUIDType, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True
    )
    product_snapshot = Column(JSON, nullable=False, default=dict)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    subtotal = Column(Numeric(12, 2), nullable=False)
    variant_info = Column(Text, nullable=True)
    created_at = created_at_column()

    order = relationship("Order", back_populates="order_items")
