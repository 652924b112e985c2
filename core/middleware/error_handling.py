"""
Error handling with security-compliant error sanitization.

Maps the domain error taxonomy to HTTP responses:
- Unauthenticated -> 401
- Forbidden -> 403
- InvalidReference / InvalidStatus / bad input -> 400
- NotFound -> 404
- malformed payload -> 422
- any storage fault -> 500, logged, never exposing internal detail
"""

import logging
import re
import traceback
from typing import Any, Callable, Optional

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import ATSError

logger = logging.getLogger(__name__)

# Patterns for sensitive data that should never be logged
SENSITIVE_PATTERNS = [
    re.compile(r'password["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'token["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'api[_-]?key["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'secret["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'authorization["\s:]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'bearer\s+[A-Za-z0-9\-_.]+', re.IGNORECASE),
]


def sanitize_error_message(message: Any) -> str:
    """
    Remove sensitive information from error messages.

    Args:
        message: Original error message

    Returns:
        Sanitized error message
    """
    sanitized = str(message)
    for pattern in SENSITIVE_PATTERNS:
        sanitized = pattern.sub('[REDACTED]', sanitized)
    return sanitized


def _format_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": sanitize_error_message(error["msg"]),
            "type": error["type"],
        })
    return errors


def build_error_response(
    exc: Exception,
    path: str,
    method: str,
    debug: bool = False,
    request_id: Optional[str] = None,
) -> JSONResponse:
    """
    Translate an exception into the JSON error envelope.

    Args:
        exc: The exception to handle
        path: Request path
        method: Request method
        debug: Whether to include tracebacks for unexpected errors
        request_id: Request ID to echo back, if known

    Returns:
        JSONResponse with error details
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "INTERNAL_SERVER_ERROR"
    message = "An unexpected error occurred"
    details = None
    headers = None

    if isinstance(exc, ATSError):
        status_code = exc.status_code
        error_code = exc.error_code
        message = sanitize_error_message(exc.message)
        if status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        logger.warning(
            f"{type(exc).__name__}: {method} {path} - {message}"
        )

    elif isinstance(exc, StarletteHTTPException):
        status_code = exc.status_code
        error_code = "HTTP_EXCEPTION"
        message = sanitize_error_message(exc.detail)
        logger.warning(
            f"HTTP exception: {method} {path} - "
            f"Status: {status_code}, Message: {message}"
        )

    elif isinstance(exc, RequestValidationError):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        error_code = "VALIDATION_ERROR"
        message = "Request validation failed"
        details = _format_validation_errors(exc)
        logger.warning(
            f"Validation error: {method} {path} - Errors: {details}"
        )

    elif isinstance(exc, IntegrityError):
        status_code = status.HTTP_409_CONFLICT
        error_code = "INTEGRITY_ERROR"
        message = "Database integrity constraint violated"
        logger.error(
            f"Database integrity error: {method} {path}", exc_info=exc
        )

    elif isinstance(exc, OperationalError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        error_code = "DATABASE_ERROR"
        message = "Database service temporarily unavailable"
        logger.error(
            f"Database operational error: {method} {path}", exc_info=exc
        )

    elif isinstance(exc, SQLAlchemyError):
        error_code = "DATABASE_ERROR"
        message = "A database error occurred"
        logger.error(f"SQLAlchemy error: {method} {path}", exc_info=exc)

    elif isinstance(exc, ValueError):
        status_code = status.HTTP_400_BAD_REQUEST
        error_code = "INVALID_INPUT"
        message = sanitize_error_message(str(exc)) or "Invalid input provided"
        logger.warning(f"Value error: {method} {path} - {message}")

    else:
        logger.error(
            f"Unhandled exception: {method} {path} - "
            f"{type(exc).__name__}: {sanitize_error_message(str(exc))}",
            exc_info=exc,
        )
        if debug:
            details = {
                "type": type(exc).__name__,
                "traceback": "".join(traceback.format_exception(exc)),
            }

    error_response = {
        "error": {
            "code": error_code,
            "message": message,
            "path": path,
            "method": method,
        }
    }
    if details is not None:
        error_response["error"]["details"] = details
    if request_id:
        error_response["error"]["request_id"] = request_id

    return JSONResponse(
        status_code=status_code, content=error_response, headers=headers
    )


class ErrorHandlingMiddleware:
    """
    Outermost safety net: turns anything that escapes the application
    into a sanitized JSON error response.
    """

    def __init__(self, app: Callable, debug: bool = False):
        self.app = app
        self.debug = debug

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            await self.app(scope, receive, send)
        except Exception as exc:
            response = self._handle_exception(exc, scope)
            await response(scope, receive, send)

    def _handle_exception(self, exc: Exception, scope: dict) -> Response:
        request_id = None
        for key, value in scope.get("headers", []):
            if key == b"x-request-id":
                request_id = value.decode()
                break

        return build_error_response(
            exc,
            path=scope.get("path", "unknown"),
            method=scope.get("method", "unknown"),
            debug=self.debug,
            request_id=request_id,
        )


def setup_error_handlers(app, debug: bool = False):
    """
    Set up exception handlers for FastAPI application.

    Args:
        app: FastAPI application instance
        debug: Whether to include tracebacks for unexpected errors
    """

    async def handle(request: Request, exc: Exception) -> JSONResponse:
        return build_error_response(
            exc,
            path=str(request.url.path),
            method=request.method,
            debug=debug,
            request_id=getattr(request.state, "request_id", None),
        )

    for exc_class in (
        ATSError,
        StarletteHTTPException,
        RequestValidationError,
        SQLAlchemyError,
        ValueError,
    ):
        app.add_exception_handler(exc_class, handle)
