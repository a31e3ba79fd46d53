"""RefreshToken model for rotating refresh tokens."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String

from storefront.core.database import Base
from storefront.models.shared import UUIDType, created_at_column, generate_uuid


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(
        UUIDType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token = Column(String(1024), nullable=False, unique=True)
    revoked = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = created_at_column()
