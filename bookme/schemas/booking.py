# bookme/schemas/booking.py
"""
Booking schemas for BookMe.

Requests are validated here for shape only; whether a status exists and
whether the change is legal are decided by the service layer. Responses
are built with ``BookingResponse.from_booking``, an explicit projection
that only exposes public profile fields of the parties.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from ..core.constants import MAX_MESSAGE_LENGTH, MAX_NOTES_LENGTH, MAX_REASON_LENGTH
from ..models.booking import BookingStatus
from ..services import booking_lifecycle as lifecycle
from .base import Money, StandardizedModel, StrictRequestModel


class BookingCreate(StrictRequestModel):
    """Body of ``POST /bookings``."""

    service_id: str = Field(..., min_length=1, description="Service to book")
    requester_id: str = Field(..., min_length=1, description="Must be the authenticated caller")
    message: Optional[str] = Field(
        None, max_length=MAX_MESSAGE_LENGTH, description="Optional note to the provider"
    )


class BookingStatusUpdate(StrictRequestModel):
    """Body of ``PATCH /bookings/{id}``."""

    status: str = Field(..., description="Requested next status")
    notes: Optional[str] = Field(
        None, max_length=MAX_NOTES_LENGTH, description="Provider notes; ignored for requesters"
    )
    cancellation_reason: Optional[str] = Field(None, max_length=MAX_REASON_LENGTH)

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class UserSummary(StandardizedModel):
    """Public profile of a booking party. Email and account flags stay private."""

    id: str
    display_name: str
    avatar: Optional[str] = None
    rating: Money = Money("0")
    review_count: int = 0

    @classmethod
    def from_user(cls, user: Any) -> "UserSummary":
        return cls(
            id=user.id,
            display_name=user.display_name,
            avatar=user.avatar,
            rating=user.rating if user.rating is not None else Money("0"),
            review_count=user.review_count or 0,
        )


class ServiceSummary(StandardizedModel):
    id: str
    title: str
    description: Optional[str] = None
    duration: int
    price: Money
    category: Optional[str] = None
    location: Optional[str] = None

    @classmethod
    def from_service(cls, service: Any) -> "ServiceSummary":
        return cls(
            id=service.id,
            title=service.title,
            description=service.description,
            duration=service.duration,
            price=service.price,
            category=service.category,
            location=service.location,
        )


class BookingResponse(StandardizedModel):
    """Expanded booking as returned by every booking endpoint."""

    id: str
    service_id: str
    requester_id: str
    provider_id: str
    message: Optional[str] = None
    status: BookingStatus
    provider_notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_by_id: Optional[str] = None

    created_at: datetime
    updated_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    declined_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    service: ServiceSummary
    requester: UserSummary
    provider: UserSummary
    allowed_transitions: List[BookingStatus] = Field(default_factory=list)

    @classmethod
    def from_booking(cls, booking: Any, viewer_id: Optional[str] = None) -> "BookingResponse":
        """
        Project a Booking ORM row with its service and parties loaded.

        ``allowed_transitions`` lists the statuses ``viewer_id`` may move the
        booking to next; it is empty for non-parties or when no viewer is given.
        """
        status = BookingStatus(booking.status)
        role = lifecycle.actor_role_for(booking, viewer_id)
        next_statuses = lifecycle.allowed_transitions(status, role) if role else []
        return cls(
            id=booking.id,
            service_id=booking.service_id,
            requester_id=booking.requester_id,
            provider_id=booking.provider_id,
            message=booking.message,
            status=status,
            provider_notes=booking.provider_notes,
            cancellation_reason=booking.cancellation_reason,
            cancelled_by_id=booking.cancelled_by_id,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
            confirmed_at=booking.confirmed_at,
            declined_at=booking.declined_at,
            completed_at=booking.completed_at,
            cancelled_at=booking.cancelled_at,
            service=ServiceSummary.from_service(booking.service),
            requester=UserSummary.from_user(booking.requester),
            provider=UserSummary.from_user(booking.provider),
            allowed_transitions=next_statuses,
        )


class BookingEnvelope(StandardizedModel):
    """``{booking: ...}`` wrapper for single-booking responses."""

    booking: BookingResponse


class BookingListResponse(StandardizedModel):
    bookings: List[BookingResponse]
