# bookme/api/dependencies/database.py
"""Database session dependency."""

from ...database import get_db

__all__ = ["get_db"]
