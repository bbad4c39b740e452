# bookme/services/__init__.py
"""
Service layer for BookMe.

Business rules and transaction boundaries; routes call into here and
repositories are called from here.
"""

from .availability_guard import BookingGuard
from .base import BaseService
from .booking_lifecycle import (
    BookingTransition,
    actor_role_for,
    allowed_transitions,
    is_terminal,
    parse_status,
    transition,
)
from .booking_service import BookingService

__all__ = [
    "BaseService",
    "BookingGuard",
    "BookingService",
    "BookingTransition",
    "actor_role_for",
    "allowed_transitions",
    "is_terminal",
    "parse_status",
    "transition",
]
