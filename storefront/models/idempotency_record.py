"""Claimed ``Idempotency-Key`` values for payment capture."""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String, UniqueConstraint

from storefront.core.database import Base
from storefront.models.shared import UUIDType, created_at_column, generate_uuid


class IdempotencyRecord(Base):
    """One client key, bound to the order it was first used for.

    ``response_status`` stays empty while the capture is in flight.
    """

    __tablename__ = "idempotency_records"
    __table_args__ = (
        UniqueConstraint("user_id", "idempotency_key", name="uq_user_idempotency_key"),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(
        UUIDType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    idempotency_key = Column(String(255), nullable=False, index=True)
    order_id = Column(UUIDType, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    response_status = Column(Integer, nullable=True)
    response_body = Column(JSON, nullable=True)
    created_at = created_at_column()
