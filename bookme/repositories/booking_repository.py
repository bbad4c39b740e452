# bookme/repositories/booking_repository.py
"""
Booking Repository for BookMe

Implements all data access for the booking core:
- Filtered, newest-first listing with the service/requester/provider loaded
- Single booking lookup with details
- Row-locked lookup for status changes
- Pending-booking lookup used by the creation guard
"""

import logging
from typing import Any, List, Optional, cast

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.constants import DEFAULT_QUERY_LIMIT
from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def create(self, **kwargs: Any) -> Booking:
        """Create a booking, exposing integrity errors for conflict handling."""
        try:
            return super().create(**kwargs)
        except RepositoryException as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise exc.__cause__
            raise

    def list_bookings(
        self,
        *,
        requester_id: Optional[str] = None,
        provider_id: Optional[str] = None,
        party_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
        limit: int = DEFAULT_QUERY_LIMIT,
    ) -> List[Booking]:
        """
        List bookings newest first with their relations loaded.

        Args:
            requester_id: Only bookings created by this user
            provider_id: Only bookings on services owned by this user
            party_id: Only bookings in which this user is requester or provider
            status: Only bookings currently in this status
            limit: Maximum number of rows

        Returns:
            Bookings ordered by ``created_at`` descending
        """
        try:
            query = self._apply_eager_loading(self.db.query(Booking))

            if requester_id:
                query = query.filter(Booking.requester_id == requester_id)
            if provider_id:
                query = query.filter(Booking.provider_id == provider_id)
            if party_id:
                query = query.filter(
                    or_(Booking.requester_id == party_id, Booking.provider_id == party_id)
                )
            if status:
                query = query.filter(Booking.status == status.value)

            query = query.order_by(Booking.created_at.desc(), Booking.id.desc()).limit(limit)
            return cast(List[Booking], query.all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    def get_booking_with_details(self, booking_id: str) -> Optional[Booking]:
        """Get a booking with service, requester and provider loaded."""
        try:
            booking: Booking | None = (
                self._apply_eager_loading(self.db.query(Booking))
                .filter(Booking.id == booking_id)
                .first()
            )
            return booking
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting booking details: {str(e)}")
            raise RepositoryException(f"Failed to get booking details: {str(e)}")

    def get_for_update(self, booking_id: str) -> Optional[Booking]:
        """
        Load a booking and lock its row until the transaction ends.

        ``FOR UPDATE`` is emitted on PostgreSQL; SQLite ignores it and
        serializes writers at the database level instead.
        """
        try:
            query = self.db.query(Booking).filter(Booking.id == booking_id)
            if self.dialect_name == "postgresql":
                query = query.with_for_update().populate_existing()
            booking: Booking | None = query.first()
            return booking
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to lock booking: {str(e)}")

    def find_pending(self, service_id: str, requester_id: str) -> Optional[Booking]:
        """Return the pending booking for a (service, requester) pair, if any."""
        try:
            booking: Booking | None = (
                self.db.query(Booking)
                .filter(
                    Booking.service_id == service_id,
                    Booking.requester_id == requester_id,
                    Booking.status == BookingStatus.PENDING.value,
                )
                .first()
            )
            return booking
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking pending bookings: {str(e)}")
            raise RepositoryException(f"Failed to check pending bookings: {str(e)}")

    # Helper method overrides

    def _apply_eager_loading(self, query: Query) -> Query:
        """Load everything the expanded booking projection reads."""
        return query.options(
            joinedload(Booking.service),
            joinedload(Booking.requester),
            joinedload(Booking.provider),
        )
