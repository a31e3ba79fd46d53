"""Payment model - log of processor charges for orders."""

from sqlalchemy import Column, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import relationship

from storefront.core.database import Base
from storefront.models.shared import UUIDType, created_at_column, generate_uuid


class Payment(Base):
    """One successful capture. Rows are never updated in place."""

    __tablename__ = "payments"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(
        UUIDType, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    order_id = Column(
        UUIDType, ForeignKey("orders.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    payment_card_id = Column(
        UUIDType, ForeignKey("payment_cards.id", ondelete="SET NULL"), nullable=True
    )

    # Processor info
    processor_payment_intent_id = Column(String(255), nullable=False, unique=True)
    processor_payment_method_id = Column(String(255), nullable=False)

    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    status = Column(String(50), nullable=False)
    receipt_url = Column(Text, nullable=True)

    created_at = created_at_column()

    order = relationship("Order")
    payment_card = relationship("PaymentCard")
