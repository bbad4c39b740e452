# bookme/repositories/service_repository.py
"""
Service Repository for BookMe

Read-only access to provider services for the booking core.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.service import Service
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ServiceRepository(BaseRepository[Service]):
    """Repository for service lookups."""

    def __init__(self, db: Session):
        super().__init__(db, Service)

    def get_bookable(self, service_id: str) -> Optional[Service]:
        """Get a service by id regardless of ``is_active``; callers decide."""
        try:
            service: Service | None = self.db.query(Service).filter(Service.id == service_id).first()
            return service
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting service {service_id}: {str(e)}")
            raise RepositoryException(f"Failed to get service: {str(e)}")
