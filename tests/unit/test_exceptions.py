# tests/unit/test_exceptions.py
"""Tests for domain exception to HTTP mapping."""

import pytest

from bookme.core.exceptions import (
    DuplicatePendingBookingException,
    ForbiddenException,
    InvalidStatusException,
    InvalidTransitionException,
    NotFoundException,
    SelfBookingException,
    ServiceException,
    ServiceUnavailableException,
    UnauthorizedException,
)


@pytest.mark.parametrize(
    "exc,status_code,code",
    [
        (NotFoundException("Booking not found"), 404, "NOT_FOUND"),
        (ServiceUnavailableException("svc"), 400, "SERVICE_UNAVAILABLE"),
        (SelfBookingException("svc"), 400, "SELF_BOOKING"),
        (DuplicatePendingBookingException("svc", "usr"), 400, "DUPLICATE_PENDING_BOOKING"),
        (InvalidTransitionException("confirmed", "pending"), 400, "INVALID_TRANSITION"),
        (InvalidStatusException("in_progress"), 400, "INVALID_STATUS"),
        (ForbiddenException("nope"), 403, "FORBIDDEN"),
        (UnauthorizedException("who are you"), 401, "UNAUTHORIZED"),
        (ServiceException("db exploded"), 500, "INTERNAL_ERROR"),
    ],
)
def test_status_and_code(exc, status_code, code):
    http_exc = exc.to_http_exception()
    assert http_exc.status_code == status_code
    assert http_exc.detail["code"] == code


def test_service_unavailable_message():
    exc = ServiceUnavailableException("svc_1")
    assert exc.message == "Service is not available"
    assert exc.details == {"service_id": "svc_1"}


def test_duplicate_pending_message():
    exc = DuplicatePendingBookingException("svc_1", "usr_1")
    assert exc.message == "You already have a pending booking for this service"


def test_service_exception_hides_cause():
    http_exc = ServiceException("psycopg2.OperationalError: connection refused").to_http_exception()
    assert http_exc.detail["message"] == "Internal server error"
    assert http_exc.detail["details"] == {}


def test_unauthorized_sets_challenge_header():
    http_exc = UnauthorizedException("Not authenticated").to_http_exception()
    assert http_exc.headers == {"WWW-Authenticate": "Bearer"}


def test_details_default_to_empty_dict():
    assert NotFoundException("gone").details == {}
