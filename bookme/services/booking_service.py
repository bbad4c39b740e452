# bookme/services/booking_service.py
"""
Booking Service for BookMe

Handles the booking lifecycle for the request/response boundary:
- Listing and reading bookings the caller is a party to
- Creating bookings behind the creation guard
- Status changes decided by the lifecycle engine under a row lock

Authorization lives here: the caller's role on a booking is derived from
the authenticated user, never from ids supplied in the request body.
"""

from datetime import datetime, timezone
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_QUERY_LIMIT
from ..core.enums import ActorRole
from ..core.exceptions import (
    DomainException,
    DuplicatePendingBookingException,
    ForbiddenException,
    NotFoundException,
    ServiceException,
)
from ..core.ulid_helper import is_valid_ulid
from ..models.booking import Booking, BookingStatus
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from .availability_guard import BookingGuard
from .base import BaseService
from .booking_lifecycle import actor_role_for, parse_status, transition

logger = logging.getLogger(__name__)

PENDING_UNIQUE_INDEX = "uq_bookings_pending_service_requester"


class BookingService(BaseService):
    """Service layer for booking operations."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_booking_repository(db)
        self.service_repository = RepositoryFactory.create_service_repository(db)
        self.guard = BookingGuard(self.service_repository, self.repository)

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self,
        user: User,
        requester_id: Optional[str] = None,
        provider_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
        limit: int = DEFAULT_QUERY_LIMIT,
    ) -> List[Booking]:
        """
        List bookings visible to ``user``, newest first.

        Party filters must name the caller; results are always limited to
        bookings the caller is requester or provider on.

        Raises:
            ForbiddenException: A party filter names only other users
        """
        party_filters = {value for value in (requester_id, provider_id) if value}
        if party_filters and user.id not in party_filters:
            raise ForbiddenException(
                "You can only list bookings you are a party to",
                details={"requester_id": requester_id, "provider_id": provider_id},
            )

        return self.repository.list_bookings(
            requester_id=requester_id,
            provider_id=provider_id,
            party_id=user.id,
            status=status,
            limit=limit,
        )

    @BaseService.measure_operation("get_booking")
    def get_booking(self, booking_id: str, user: User) -> Booking:
        self._require_booking_id(booking_id)
        booking = self.repository.get_booking_with_details(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", details={"booking_id": booking_id})
        self.resolve_actor_role(booking, user)
        return booking

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self,
        user: User,
        service_id: str,
        requester_id: str,
        message: Optional[str] = None,
    ) -> Booking:
        """
        Create a pending booking for ``user`` on a service.

        Guard checks and the insert share one transaction. A concurrent
        duplicate that slips past the guard is rejected by the partial
        unique index and reported the same way.

        Raises:
            ForbiddenException: ``requester_id`` is not the caller
            NotFoundException: Service does not exist
            ServiceUnavailableException: Service is deactivated
            SelfBookingException: Caller owns the service
            DuplicatePendingBookingException: Caller already has a pending booking
        """
        if requester_id != user.id:
            raise ForbiddenException(
                "You can only create bookings for yourself",
                details={"requester_id": requester_id},
            )

        try:
            with self.repository.transaction():
                service = self.guard.check_can_create(service_id, requester_id)
                booking = self.repository.create(
                    service_id=service.id,
                    requester_id=requester_id,
                    provider_id=service.provider_id,
                    message=message,
                    status=BookingStatus.PENDING.value,
                )
                booking_id = booking.id
        except IntegrityError as exc:
            if self._is_pending_conflict(exc):
                self.logger.info(
                    "Concurrent duplicate pending booking rejected for service %s", service_id
                )
                raise DuplicatePendingBookingException(service_id, requester_id) from exc
            self.logger.error("Unexpected integrity error creating booking: %s", exc)
            raise ServiceException(f"Failed to create booking: {exc}") from exc

        prometheus_metrics.inc_booking_created()
        self.log_operation(
            "create_booking",
            booking_id=booking_id,
            service_id=service_id,
            requester_id=requester_id,
        )
        return self._reload(booking_id)

    @BaseService.measure_operation("update_booking_status")
    def update_status(
        self,
        booking_id: str,
        user: User,
        new_status: str,
        notes: Optional[str] = None,
        cancellation_reason: Optional[str] = None,
    ) -> Booking:
        """
        Move a booking to the status named by ``new_status`` on behalf of ``user``.

        The row is locked for the duration of the transaction so concurrent
        changes serialize; the loser sees the new status and fails the
        lifecycle check.

        Raises:
            InvalidStatusException: ``new_status`` is not a booking status
            NotFoundException: Booking does not exist
            ForbiddenException: Caller is not a party, or their role may not take the edge
            InvalidTransitionException: The edge does not exist
        """
        requested = parse_status(new_status)
        self._require_booking_id(booking_id)
        with self.repository.transaction():
            booking = self.repository.get_for_update(booking_id)
            if booking is None:
                raise NotFoundException("Booking not found", details={"booking_id": booking_id})

            role = self.resolve_actor_role(booking, user)
            current_status = booking.status
            try:
                change = transition(booking, requested, role)
            except DomainException as exc:
                prometheus_metrics.record_booking_transition(
                    current_status, requested.value, role.value, exc.code
                )
                raise

            booking.apply_status(
                change.to_status, datetime.now(timezone.utc), change.timestamp_field
            )
            if notes is not None and role == ActorRole.PROVIDER:
                booking.provider_notes = notes
            if change.is_cancellation:
                booking.record_cancellation(user.id, cancellation_reason)
            self.repository.flush()

        prometheus_metrics.record_booking_transition(
            change.from_status.value, change.to_status.value, role.value, "applied"
        )
        self.log_operation(
            "update_booking_status",
            booking_id=booking_id,
            from_status=change.from_status.value,
            to_status=change.to_status.value,
            actor_role=role.value,
        )
        return self._reload(booking_id)

    def resolve_actor_role(self, booking: Booking, user: User) -> ActorRole:
        """Caller's role on ``booking``; non-parties are forbidden."""
        role = actor_role_for(booking, user.id)
        if role is None:
            raise ForbiddenException(
                "You do not have access to this booking", details={"booking_id": booking.id}
            )
        return role

    @staticmethod
    def _require_booking_id(booking_id: str) -> None:
        # Malformed ids cannot exist; skip the query
        if not is_valid_ulid(booking_id):
            raise NotFoundException("Booking not found", details={"booking_id": booking_id})

    def _reload(self, booking_id: str) -> Booking:
        booking = self.repository.get_booking_with_details(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", details={"booking_id": booking_id})
        return booking

    @staticmethod
    def _is_pending_conflict(exc: IntegrityError) -> bool:
        orig = getattr(exc, "orig", None)
        diag = getattr(orig, "diag", None)
        constraint_name = getattr(diag, "constraint_name", "") if diag is not None else ""
        if constraint_name:
            return constraint_name == PENDING_UNIQUE_INDEX

        # SQLite reports the indexed columns rather than the index name
        text = str(orig)
        return PENDING_UNIQUE_INDEX in text or (
            "bookings.service_id" in text and "bookings.requester_id" in text
        )
