# bookme/api/dependencies/__init__.py
"""FastAPI dependencies for database sessions, authentication and services."""

from .auth import get_current_user
from .database import get_db
from .services import get_booking_service

__all__ = ["get_booking_service", "get_current_user", "get_db"]
