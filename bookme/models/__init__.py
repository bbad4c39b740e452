# bookme/models/__init__.py
"""
Database models for the BookMe booking core.

Importing this package registers every mapper on ``Base.metadata``.
"""

from .booking import Booking, BookingStatus
from .service import Service
from .user import User

__all__ = [
    "Booking",
    "BookingStatus",
    "Service",
    "User",
]
