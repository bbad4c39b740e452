# bookme/models/user.py
"""
User model for the BookMe marketplace.

Users are owned by the identity/profile system; the booking core only reads
the public profile fields used in booking projections. The same user can be
a provider for some bookings and a requester for others.
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String

from ..core.ulid_helper import generate_ulid
from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """
    Public profile of a marketplace member.

    Attributes:
        id: ULID primary key
        email: Login identity (never included in booking projections)
        display_name: Name shown to counterparts
        avatar: Avatar URL
        rating: Average review rating (0-5)
        review_count: Number of reviews behind ``rating``
        is_active: Whether the account may act
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(100), nullable=False)
    avatar = Column(String(500), nullable=True)
    rating = Column(Numeric(3, 2), nullable=False, default=Decimal("0"))
    review_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self) -> str:
        return f"<User {self.id} {self.display_name!r}>"
