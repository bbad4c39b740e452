# bookme/routes/bookings.py
"""
Booking routes.

All business logic is delegated to BookingService; handlers only resolve
the caller, run the service in a worker thread and project the result.

Endpoints:
    GET / - List bookings the caller is a party to
    POST / - Create a pending booking
    GET /{booking_id} - Expanded booking
    PATCH /{booking_id} - Change booking status
"""

import asyncio
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query, status

from ..api.dependencies import get_booking_service, get_current_user
from ..core.constants import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT
from ..core.exceptions import DomainException
from ..models.booking import BookingStatus
from ..models.user import User
from ..schemas.booking import (
    BookingCreate,
    BookingEnvelope,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
)
from ..services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])

_ERROR_RESPONSES = {
    401: {"description": "Missing or invalid bearer token"},
    403: {"description": "Caller may not access this booking"},
}


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


@router.get("", response_model=BookingListResponse, responses=_ERROR_RESPONSES)
async def list_bookings(
    requester_id: Optional[str] = Query(None, alias="requesterId"),
    provider_id: Optional[str] = Query(None, alias="providerId"),
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    limit: int = Query(DEFAULT_QUERY_LIMIT, ge=1, le=MAX_QUERY_LIMIT),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    """List bookings newest first, expanded with service and parties."""
    try:
        bookings = await asyncio.to_thread(
            booking_service.list_bookings,
            current_user,
            requester_id=requester_id,
            provider_id=provider_id,
            status=status_filter,
            limit=limit,
        )
        return BookingListResponse(
            bookings=[BookingResponse.from_booking(b, current_user.id) for b in bookings]
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "",
    response_model=BookingEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={
        **_ERROR_RESPONSES,
        400: {"description": "Service unavailable, self-booking or duplicate pending booking"},
        404: {"description": "Service not found"},
    },
)
async def create_booking(
    payload: BookingCreate = Body(...),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingEnvelope:
    """Create a pending booking for the authenticated requester."""
    try:
        booking = await asyncio.to_thread(
            booking_service.create_booking,
            current_user,
            service_id=payload.service_id,
            requester_id=payload.requester_id,
            message=payload.message,
        )
        return BookingEnvelope(booking=BookingResponse.from_booking(booking, current_user.id))
    except DomainException as e:
        handle_domain_exception(e)


@router.get(
    "/{booking_id}",
    response_model=BookingEnvelope,
    responses={**_ERROR_RESPONSES, 404: {"description": "Booking not found"}},
)
async def get_booking(
    booking_id: str = Path(..., description="Booking ULID"),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingEnvelope:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, booking_id, current_user)
        return BookingEnvelope(booking=BookingResponse.from_booking(booking, current_user.id))
    except DomainException as e:
        handle_domain_exception(e)


@router.patch(
    "/{booking_id}",
    response_model=BookingEnvelope,
    responses={
        **_ERROR_RESPONSES,
        400: {"description": "Unknown status, or change not allowed from the current status"},
        404: {"description": "Booking not found"},
    },
)
async def update_booking_status(
    booking_id: str = Path(..., description="Booking ULID"),
    payload: BookingStatusUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingEnvelope:
    """
    Change a booking's status.

    The caller's role (provider or requester) is derived from the booking;
    the lifecycle rules decide whether that role may take the change.
    """
    try:
        booking = await asyncio.to_thread(
            booking_service.update_status,
            booking_id,
            current_user,
            payload.status,
            notes=payload.notes,
            cancellation_reason=payload.cancellation_reason,
        )
        return BookingEnvelope(booking=BookingResponse.from_booking(booking, current_user.id))
    except DomainException as e:
        handle_domain_exception(e)
