# bookme/models/service.py
"""
Service model: an offering published by a provider.

The booking core reads services to validate bookings and to build the
service summary in booking responses; it never writes them.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Service(Base):
    """Bookable offering owned by a provider."""

    __tablename__ = "services"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    provider_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False, comment="Minutes")
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String(100), nullable=True)
    location = Column(String(255), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=_utcnow)

    provider = relationship("User", foreign_keys=[provider_id])

    __table_args__ = (
        CheckConstraint("duration > 0", name="ck_services_duration_positive"),
        CheckConstraint("price >= 0", name="ck_services_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Service {self.id} {self.title!r} active={self.is_active}>"
