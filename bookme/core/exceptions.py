# bookme/core/exceptions.py
"""
Domain-specific exceptions for the BookMe booking core.

These exceptions carry business-focused error messages and a stable
machine-readable code. Routes convert them with ``to_http_exception()``.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

INTERNAL_ERROR_MESSAGE = "Internal server error"


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "DOMAIN_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "VALIDATION_FAILED"


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"


class UnauthorizedException(DomainException):
    """Raised when the caller is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "UNAUTHORIZED"

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={"message": self.message, "code": self.code, "details": self.details},
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenException(DomainException):
    """Raised when the caller lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN
    default_code = "FORBIDDEN"


class ServiceException(DomainException):
    """Raised when a service operation fails for infrastructure reasons."""

    default_code = "INTERNAL_ERROR"

    def to_http_exception(self) -> HTTPException:
        # Never leak driver/database detail to clients
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": INTERNAL_ERROR_MESSAGE, "code": self.code, "details": {}},
        )


# Specific booking exceptions


class ServiceUnavailableException(ValidationException):
    """Raised when a booking targets a deactivated service."""

    def __init__(self, service_id: str):
        super().__init__(
            message="Service is not available",
            code="SERVICE_UNAVAILABLE",
            details={"service_id": service_id},
        )


class SelfBookingException(ValidationException):
    """Raised when a provider tries to book their own service."""

    def __init__(self, service_id: str):
        super().__init__(
            message="You cannot book your own service",
            code="SELF_BOOKING",
            details={"service_id": service_id},
        )


class DuplicatePendingBookingException(ValidationException):
    """Raised when the requester already has a pending booking for the service."""

    def __init__(self, service_id: str, requester_id: str):
        super().__init__(
            message="You already have a pending booking for this service",
            code="DUPLICATE_PENDING_BOOKING",
            details={"service_id": service_id, "requester_id": requester_id},
        )


class InvalidStatusException(ValidationException):
    """Raised when a status update names a status that does not exist."""

    def __init__(self, requested_status: str):
        super().__init__(
            message="Invalid status",
            code="INVALID_STATUS",
            details={"requested_status": requested_status},
        )


class InvalidTransitionException(ValidationException):
    """Raised when a status change is not reachable from the current status."""

    def __init__(self, current_status: str, requested_status: str):
        super().__init__(
            message=f"Cannot change booking status from {current_status} to {requested_status}",
            code="INVALID_TRANSITION",
            details={"current_status": current_status, "requested_status": requested_status},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Used when data access operations fail, such as database connection
    issues, query failures, or constraint violations.
    """
