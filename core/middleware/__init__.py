"""
Core middleware package.

This package provides the request pipeline components:
- Error handling with sensitive data sanitization
- Structured logging with header masking
- Authentication with JWT bearer tokens
- Company-scoped authorization checks
"""

from core.middleware.error_handling import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    sanitize_error_message,
)

from core.middleware.logging import (
    StructuredLoggingMiddleware,
    setup_logging,
    get_logger,
)

from core.middleware.authentication import (
    AuthenticationMiddleware,
    get_current_user,
    AuthenticationError,
)

from core.middleware.authorization import (
    DEFAULT_ROLE_PERMISSIONS,
    check_job_permission,
    check_permission,
    get_user_permissions,
    has_permission,
    require_permission,
)

__all__ = [
    # Error handling
    "ErrorHandlingMiddleware",
    "setup_error_handlers",
    "sanitize_error_message",
    # Logging
    "StructuredLoggingMiddleware",
    "setup_logging",
    "get_logger",
    # Authentication
    "AuthenticationMiddleware",
    "get_current_user",
    "AuthenticationError",
    # Authorization
    "DEFAULT_ROLE_PERMISSIONS",
    "check_job_permission",
    "check_permission",
    "get_user_permissions",
    "has_permission",
    "require_permission",
]
