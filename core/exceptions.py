"""
Domain exceptions shared by services and routes.

Each exception carries the HTTP status and error code it maps to, so the
error handlers in ``core.middleware.error_handling`` can translate them
without knowing about individual services.
"""

from fastapi import status


class ATSError(Exception):
    """Base exception for all business errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "ATS_ERROR"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or self.error_code


class Unauthenticated(ATSError):
    """No authenticated identity present."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHENTICATED"


class Forbidden(ATSError):
    """Identity present but the permission check failed."""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"


class NotFound(ATSError):
    """Requested resource does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"


class InvalidReference(ATSError):
    """Payload references a missing or inactive record."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_REFERENCE"


class InvalidStatus(ATSError):
    """Status value is not part of the job status enumeration."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_STATUS"
