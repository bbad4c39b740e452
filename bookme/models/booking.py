# bookme/models/booking.py
"""
Booking model for the BookMe marketplace.

A booking is a requester's request to consume a provider's service. Its
``status`` moves only through the lifecycle engine
(``bookme.services.booking_lifecycle``); everything else on the row is
either fixed at creation or metadata stamped by a transition.

Architecture: ``provider_id`` is copied from the service's owner when the
booking is created so provider-side listing and authorization never need
to join through ``services``.
"""

from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Optional

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"  # Initial - awaiting provider decision
    CONFIRMED = "confirmed"  # Provider accepted
    DECLINED = "declined"  # Provider refused
    COMPLETED = "completed"  # Service delivered
    CANCELLED = "cancelled"  # Withdrawn by either party

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


_STATUS_SQL_LIST = ", ".join(f"'{value}'" for value in BookingStatus.values())
PENDING_PREDICATE = text(f"status = '{BookingStatus.PENDING.value}'")


class Booking(Base):
    """
    Booking record between a requester and the provider of a service.

    ``message`` is written once by the requester. ``provider_notes`` and the
    cancellation fields are written by status updates.
    """

    __tablename__ = "bookings"

    # Primary key
    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)

    # Core relationships
    service_id = Column(
        String(26), ForeignKey("services.id", ondelete="CASCADE"), nullable=False, index=True
    )
    requester_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    provider_id = Column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Booking details
    message = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    provider_notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=_utcnow)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    declined_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    # Cancellation tracking
    cancelled_by_id = Column(String(26), ForeignKey("users.id"), nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    # Relationships
    service = relationship("Service", foreign_keys=[service_id])
    requester = relationship("User", foreign_keys=[requester_id])
    provider = relationship("User", foreign_keys=[provider_id])
    cancelled_by = relationship("User", foreign_keys=[cancelled_by_id])

    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_SQL_LIST})", name="ck_bookings_status_valid"),
        CheckConstraint("requester_id <> provider_id", name="ck_bookings_not_self_booking"),
        # At most one pending booking per (service, requester)
        Index(
            "uq_bookings_pending_service_requester",
            "service_id",
            "requester_id",
            unique=True,
            postgresql_where=PENDING_PREDICATE,
            sqlite_where=PENDING_PREDICATE,
        ),
        Index("ix_bookings_provider_created", "provider_id", "created_at"),
        Index("ix_bookings_requester_created", "requester_id", "created_at"),
    )

    def apply_status(
        self,
        new_status: BookingStatus,
        at: datetime,
        timestamp_field: Optional[str] = None,
    ) -> None:
        """Write a status decided by the lifecycle engine and stamp its timestamps."""
        self.status = new_status.value
        self.updated_at = at
        if timestamp_field:
            setattr(self, timestamp_field, at)

    def record_cancellation(self, cancelled_by_id: str, reason: Optional[str] = None) -> None:
        self.cancelled_by_id = cancelled_by_id
        if reason:
            self.cancellation_reason = reason

    def __repr__(self) -> str:
        return f"<Booking {self.id} status={self.status}>"
