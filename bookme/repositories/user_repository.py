# bookme/repositories/user_repository.py
"""
User Repository for BookMe

The booking core only resolves authenticated callers; profile management
lives elsewhere.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for user lookups."""

    def __init__(self, db: Session):
        super().__init__(db, User)

    def get_active(self, user_id: str) -> Optional[User]:
        """Return the user only if the account exists and is active."""
        user = self.get_by_id(user_id, load_relationships=False)
        if user is None or not user.is_active:
            return None
        return user
