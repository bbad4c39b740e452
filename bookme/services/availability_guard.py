# bookme/services/availability_guard.py
"""
Creation guard for bookings.

Checks run in a fixed order and stop at the first failure:
service exists, service is active, requester is not the provider, and no
pending booking already exists for the (service, requester) pair.

The pending check is advisory. The partial unique index on
``bookings(service_id, requester_id) WHERE status = 'pending'`` is what
holds the invariant when two creates race past it.
"""

import logging

from ..core.exceptions import (
    DuplicatePendingBookingException,
    NotFoundException,
    SelfBookingException,
    ServiceUnavailableException,
)
from ..models.service import Service
from ..repositories.booking_repository import BookingRepository
from ..repositories.service_repository import ServiceRepository

logger = logging.getLogger(__name__)


class BookingGuard:
    """Validates that a requester may open a new booking on a service."""

    def __init__(
        self,
        service_repository: ServiceRepository,
        booking_repository: BookingRepository,
    ):
        self.service_repository = service_repository
        self.booking_repository = booking_repository

    def check_can_create(self, service_id: str, requester_id: str) -> Service:
        """
        Return the service to book, or raise the first failing check.

        Raises:
            NotFoundException: Service does not exist
            ServiceUnavailableException: Service is deactivated
            SelfBookingException: Requester owns the service
            DuplicatePendingBookingException: A pending booking already exists
        """
        service = self.service_repository.get_bookable(service_id)
        if service is None:
            raise NotFoundException("Service not found", details={"service_id": service_id})

        if not service.is_active:
            raise ServiceUnavailableException(service_id)

        if service.provider_id == requester_id:
            raise SelfBookingException(service_id)

        if self.booking_repository.find_pending(service_id, requester_id) is not None:
            logger.info(
                "Rejected duplicate pending booking for service %s by %s",
                service_id,
                requester_id,
            )
            raise DuplicatePendingBookingException(service_id, requester_id)

        return service
