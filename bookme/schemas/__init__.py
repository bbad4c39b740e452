"""Pydantic request and response schemas."""

from .booking import (
    BookingCreate,
    BookingEnvelope,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
    ServiceSummary,
    UserSummary,
)

__all__ = [
    "BookingCreate",
    "BookingEnvelope",
    "BookingListResponse",
    "BookingResponse",
    "BookingStatusUpdate",
    "ServiceSummary",
    "UserSummary",
]
