# bookme/repositories/__init__.py
"""
Repository layer for BookMe.

Data access only; transaction boundaries belong to the service layer.
"""

from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .factory import RepositoryFactory
from .service_repository import ServiceRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "RepositoryFactory",
    "ServiceRepository",
    "UserRepository",
]
