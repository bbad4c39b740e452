# tests/unit/test_booking_schemas.py
"""Tests for booking request validation and response projection."""

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

from pydantic import ValidationError
import pytest

from bookme.schemas.booking import BookingCreate, BookingResponse, BookingStatusUpdate


def _user(user_id: str, name: str) -> SimpleNamespace:
    return SimpleNamespace(
        id=user_id,
        email=f"{name.lower()}@example.com",
        display_name=name,
        avatar=None,
        rating=Decimal("4.80"),
        review_count=7,
        is_active=True,
    )


def _orm_booking() -> SimpleNamespace:
    provider = _user("01J0000000000000000000PROV", "Pat")
    requester = _user("01J0000000000000000000REQS", "Riley")
    service = SimpleNamespace(
        id="01J00000000000000000000SVC",
        provider_id=provider.id,
        title="Guitar lesson",
        description=None,
        duration=60,
        price=Decimal("45.00"),
        category="music",
        location=None,
        is_active=True,
    )
    return SimpleNamespace(
        id="01J0000000000000000000BOOK",
        service_id=service.id,
        requester_id=requester.id,
        provider_id=provider.id,
        message="Hi",
        status="pending",
        provider_notes=None,
        cancellation_reason=None,
        cancelled_by_id=None,
        created_at=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        updated_at=None,
        confirmed_at=None,
        declined_at=None,
        completed_at=None,
        cancelled_at=None,
        service=service,
        requester=requester,
        provider=provider,
    )


class TestBookingCreate:
    def test_accepts_camel_case(self):
        payload = BookingCreate.model_validate(
            {"serviceId": "svc", "requesterId": "usr", "message": "  hello  "}
        )
        assert payload.service_id == "svc"
        assert payload.requester_id == "usr"
        assert payload.message == "hello"

    def test_message_optional(self):
        assert BookingCreate.model_validate({"serviceId": "s", "requesterId": "u"}).message is None

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            BookingCreate.model_validate({"serviceId": "s", "requesterId": "u", "status": "x"})

    def test_requires_service(self):
        with pytest.raises(ValidationError):
            BookingCreate.model_validate({"requesterId": "u"})


class TestBookingStatusUpdate:
    def test_unknown_status_is_left_for_the_service(self):
        assert BookingStatusUpdate.model_validate({"status": "in_progress"}).status == "in_progress"

    @pytest.mark.parametrize("payload", [{}, {"status": 5}, {"status": None}])
    def test_status_must_be_a_string(self, payload):
        with pytest.raises(ValidationError):
            BookingStatusUpdate.model_validate(payload)

    def test_normalizes_case(self):
        assert BookingStatusUpdate.model_validate({"status": " Confirmed "}).status == "confirmed"

    def test_optional_fields(self):
        update = BookingStatusUpdate.model_validate(
            {"status": "cancelled", "cancellationReason": "Schedule clash", "notes": None}
        )
        assert update.cancellation_reason == "Schedule clash"


class TestBookingResponseProjection:
    def test_camel_case_wire_format(self):
        data = BookingResponse.from_booking(_orm_booking()).model_dump(mode="json", by_alias=True)
        assert data["serviceId"] == "01J00000000000000000000SVC"
        assert data["status"] == "pending"
        assert data["createdAt"].startswith("2026-01-02T03:04:05")
        assert data["service"]["price"] == 45.0
        assert data["provider"]["displayName"] == "Pat"
        assert data["requester"]["reviewCount"] == 7

    def test_party_summaries_hide_private_fields(self):
        data = BookingResponse.from_booking(_orm_booking()).model_dump(mode="json", by_alias=True)
        for party in ("requester", "provider"):
            assert set(data[party]) == {"id", "displayName", "avatar", "rating", "reviewCount"}

    def test_service_summary_fields(self):
        data = BookingResponse.from_booking(_orm_booking()).model_dump(mode="json", by_alias=True)
        assert set(data["service"]) == {
            "id",
            "title",
            "description",
            "duration",
            "price",
            "category",
            "location",
        }

    def test_allowed_transitions_for_viewer(self):
        booking = _orm_booking()

        as_provider = BookingResponse.from_booking(booking, booking.provider_id)
        as_requester = BookingResponse.from_booking(booking, booking.requester_id)

        assert as_provider.allowed_transitions == ["confirmed", "declined"]
        assert as_requester.allowed_transitions == ["cancelled"]

    def test_allowed_transitions_empty_without_party_viewer(self):
        booking = _orm_booking()

        assert BookingResponse.from_booking(booking).allowed_transitions == []
        outsider_view = BookingResponse.from_booking(booking, "01J0000000000000000000OTHR")
        assert outsider_view.allowed_transitions == []
