"""Booking lifecycle rules: which status changes exist and who may make them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Optional

from ..core.enums import ActorRole
from ..core.exceptions import (
    ForbiddenException,
    InvalidStatusException,
    InvalidTransitionException,
    NotFoundException,
)
from ..models.booking import Booking, BookingStatus

_BOTH: Final[frozenset[ActorRole]] = frozenset({ActorRole.PROVIDER, ActorRole.REQUESTER})

# (current, requested) -> roles allowed to take the edge
TRANSITION_TABLE: Final[dict[tuple[BookingStatus, BookingStatus], frozenset[ActorRole]]] = {
    (BookingStatus.PENDING, BookingStatus.CONFIRMED): frozenset({ActorRole.PROVIDER}),
    (BookingStatus.PENDING, BookingStatus.DECLINED): frozenset({ActorRole.PROVIDER}),
    (BookingStatus.PENDING, BookingStatus.CANCELLED): frozenset({ActorRole.REQUESTER}),
    (BookingStatus.CONFIRMED, BookingStatus.COMPLETED): _BOTH,
    (BookingStatus.CONFIRMED, BookingStatus.CANCELLED): _BOTH,
}

TERMINAL_STATUSES: Final[frozenset[BookingStatus]] = frozenset(
    {BookingStatus.DECLINED, BookingStatus.COMPLETED, BookingStatus.CANCELLED}
)

# Column stamped with the transition time when a booking enters the status
TIMESTAMP_FIELDS: Final[dict[BookingStatus, str]] = {
    BookingStatus.CONFIRMED: "confirmed_at",
    BookingStatus.DECLINED: "declined_at",
    BookingStatus.COMPLETED: "completed_at",
    BookingStatus.CANCELLED: "cancelled_at",
}


@dataclass(frozen=True)
class BookingTransition:
    from_status: BookingStatus
    to_status: BookingStatus
    actor_role: ActorRole
    timestamp_field: Optional[str] = None

    @property
    def is_cancellation(self) -> bool:
        return self.to_status == BookingStatus.CANCELLED


def parse_status(value: str) -> BookingStatus:
    """Resolve a client-supplied status name, rejecting anything outside the enum."""
    try:
        return BookingStatus(value)
    except ValueError:
        raise InvalidStatusException(str(value)) from None


def is_terminal(status: BookingStatus) -> bool:
    return BookingStatus(status) in TERMINAL_STATUSES


def actor_role_for(booking: Booking, user_id: Optional[str]) -> Optional[ActorRole]:
    """Role ``user_id`` plays on ``booking``, or None for non-parties."""
    if not user_id:
        return None
    if user_id == booking.provider_id:
        return ActorRole.PROVIDER
    if user_id == booking.requester_id:
        return ActorRole.REQUESTER
    return None


def allowed_transitions(status: BookingStatus, role: ActorRole) -> list[BookingStatus]:
    """Statuses ``role`` may move a booking in ``status`` to, in enum order."""
    current = BookingStatus(status)
    return [
        requested
        for requested in BookingStatus
        if role in TRANSITION_TABLE.get((current, requested), frozenset())
    ]


def transition(
    booking: Optional[Booking],
    requested_status: BookingStatus,
    actor_role: ActorRole,
) -> BookingTransition:
    """
    Decide a status change without touching the database or the clock.

    Edge legality is checked before role permission, so a terminal booking
    always reports ``InvalidTransitionException`` whoever asks.

    Raises:
        NotFoundException: booking is None
        InvalidTransitionException: the (current, requested) edge does not exist
        ForbiddenException: the edge exists but ``actor_role`` may not take it
    """
    if booking is None:
        raise NotFoundException("Booking not found")

    current = BookingStatus(booking.status)
    requested = BookingStatus(requested_status)
    roles = TRANSITION_TABLE.get((current, requested))

    if roles is None:
        raise InvalidTransitionException(current.value, requested.value)
    if actor_role not in roles:
        raise ForbiddenException(
            f"Only the {' or '.join(sorted(r.value for r in roles))} can change a "
            f"{current.value} booking to {requested.value}",
            details={"actor_role": actor_role.value},
        )

    return BookingTransition(
        from_status=current,
        to_status=requested,
        actor_role=actor_role,
        timestamp_field=TIMESTAMP_FIELDS.get(requested),
    )
