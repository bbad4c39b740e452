# bookme/core/enums.py
"""
Core enums for the BookMe booking core.
"""

from enum import Enum


class ActorRole(str, Enum):
    """
    Role of the caller relative to a specific booking.

    Derived per request from the authenticated user and the booking's
    parties, never from client-supplied ids.
    """

    PROVIDER = "provider"
    REQUESTER = "requester"
