# tests/unit/test_booking_lifecycle.py
"""Tests for the booking lifecycle rules."""

from itertools import product
from types import SimpleNamespace

import pytest

from bookme.core.enums import ActorRole
from bookme.core.exceptions import (
    ForbiddenException,
    InvalidStatusException,
    InvalidTransitionException,
    NotFoundException,
)
from bookme.models.booking import BookingStatus
from bookme.services.booking_lifecycle import (
    TERMINAL_STATUSES,
    actor_role_for,
    allowed_transitions,
    is_terminal,
    parse_status,
    transition,
)

P = ActorRole.PROVIDER
R = ActorRole.REQUESTER

# Every legal edge and who may take it; anything absent is illegal
EXPECTED_EDGES = {
    (BookingStatus.PENDING, BookingStatus.CONFIRMED): {P},
    (BookingStatus.PENDING, BookingStatus.DECLINED): {P},
    (BookingStatus.PENDING, BookingStatus.CANCELLED): {R},
    (BookingStatus.CONFIRMED, BookingStatus.COMPLETED): {P, R},
    (BookingStatus.CONFIRMED, BookingStatus.CANCELLED): {P, R},
}


def _booking(status: BookingStatus) -> SimpleNamespace:
    return SimpleNamespace(status=status.value)


@pytest.mark.parametrize(
    "current,requested,role", list(product(BookingStatus, BookingStatus, ActorRole))
)
def test_transition_matches_table(current, requested, role):
    roles = EXPECTED_EDGES.get((current, requested))

    if roles is None:
        with pytest.raises(InvalidTransitionException) as exc_info:
            transition(_booking(current), requested, role)
        assert exc_info.value.code == "INVALID_TRANSITION"
        assert exc_info.value.details == {
            "current_status": current.value,
            "requested_status": requested.value,
        }
    elif role not in roles:
        with pytest.raises(ForbiddenException):
            transition(_booking(current), requested, role)
    else:
        result = transition(_booking(current), requested, role)
        assert result.from_status == current
        assert result.to_status == requested
        assert result.actor_role == role


class TestTransitionEdgeCases:
    def test_missing_booking_is_not_found(self):
        with pytest.raises(NotFoundException):
            transition(None, BookingStatus.CONFIRMED, P)

    @pytest.mark.parametrize("status", list(BookingStatus))
    def test_same_status_is_invalid(self, status):
        for role in ActorRole:
            with pytest.raises(InvalidTransitionException):
                transition(_booking(status), status, role)

    def test_confirmed_back_to_pending_is_invalid(self):
        with pytest.raises(InvalidTransitionException) as exc_info:
            transition(_booking(BookingStatus.CONFIRMED), BookingStatus.PENDING, P)
        assert "confirmed to pending" in exc_info.value.message

    def test_edge_checked_before_role(self):
        # Requester can never decline, but a terminal booking reports the edge first
        with pytest.raises(InvalidTransitionException):
            transition(_booking(BookingStatus.COMPLETED), BookingStatus.DECLINED, R)

    def test_requester_cannot_confirm(self):
        with pytest.raises(ForbiddenException) as exc_info:
            transition(_booking(BookingStatus.PENDING), BookingStatus.CONFIRMED, R)
        assert exc_info.value.status_code == 403
        assert exc_info.value.details == {"actor_role": "requester"}

    def test_provider_cannot_cancel_pending(self):
        with pytest.raises(ForbiddenException):
            transition(_booking(BookingStatus.PENDING), BookingStatus.CANCELLED, P)

    def test_accepts_plain_string_status(self):
        result = transition(SimpleNamespace(status="pending"), "confirmed", P)
        assert result.to_status is BookingStatus.CONFIRMED

    def test_is_pure(self):
        booking = _booking(BookingStatus.PENDING)
        transition(booking, BookingStatus.CONFIRMED, P)
        assert booking.status == "pending"


class TestTimestampFields:
    @pytest.mark.parametrize(
        "current,requested,role,field",
        [
            (BookingStatus.PENDING, BookingStatus.CONFIRMED, P, "confirmed_at"),
            (BookingStatus.PENDING, BookingStatus.DECLINED, P, "declined_at"),
            (BookingStatus.PENDING, BookingStatus.CANCELLED, R, "cancelled_at"),
            (BookingStatus.CONFIRMED, BookingStatus.COMPLETED, R, "completed_at"),
            (BookingStatus.CONFIRMED, BookingStatus.CANCELLED, P, "cancelled_at"),
        ],
    )
    def test_timestamp_field_for_target(self, current, requested, role, field):
        assert transition(_booking(current), requested, role).timestamp_field == field

    def test_cancellation_flag(self):
        assert transition(
            _booking(BookingStatus.CONFIRMED), BookingStatus.CANCELLED, R
        ).is_cancellation
        assert not transition(
            _booking(BookingStatus.CONFIRMED), BookingStatus.COMPLETED, R
        ).is_cancellation


class TestAllowedTransitions:
    def test_pending_provider(self):
        assert allowed_transitions(BookingStatus.PENDING, P) == [
            BookingStatus.CONFIRMED,
            BookingStatus.DECLINED,
        ]

    def test_pending_requester(self):
        assert allowed_transitions(BookingStatus.PENDING, R) == [BookingStatus.CANCELLED]

    @pytest.mark.parametrize("role", list(ActorRole))
    def test_confirmed_either_party(self, role):
        assert allowed_transitions(BookingStatus.CONFIRMED, role) == [
            BookingStatus.COMPLETED,
            BookingStatus.CANCELLED,
        ]

    @pytest.mark.parametrize("status", sorted(TERMINAL_STATUSES, key=lambda s: s.value))
    def test_terminal_has_no_exits(self, status):
        assert is_terminal(status)
        for role in ActorRole:
            assert allowed_transitions(status, role) == []

    def test_non_terminal(self):
        assert not is_terminal(BookingStatus.PENDING)
        assert not is_terminal(BookingStatus.CONFIRMED)


class TestParseStatus:
    @pytest.mark.parametrize("status", list(BookingStatus))
    def test_known_statuses(self, status):
        assert parse_status(status.value) is status

    @pytest.mark.parametrize("value", ["in_progress", "bogus", "", "PENDING"])
    def test_unknown_status_is_invalid(self, value):
        with pytest.raises(InvalidStatusException) as exc_info:
            parse_status(value)

        assert exc_info.value.code == "INVALID_STATUS"
        assert exc_info.value.details == {"requested_status": value}


class TestActorRoleFor:
    booking = SimpleNamespace(provider_id="prov", requester_id="req")

    def test_parties(self):
        assert actor_role_for(self.booking, "prov") is P
        assert actor_role_for(self.booking, "req") is R

    @pytest.mark.parametrize("user_id", ["someone-else", "", None])
    def test_non_parties(self, user_id):
        assert actor_role_for(self.booking, user_id) is None
