"""
Authentication middleware for verifying user identity.

This middleware:
1. Validates JWT tokens from Authorization headers
2. Rejects missing, expired or malformed tokens on protected paths
3. Stores the verified token payload in the request scope

Loading the user happens in the ``get_current_user`` dependency, inside
the request's database session.
"""

import logging
from typing import Callable, Optional
from datetime import datetime, timezone

import jwt
from fastapi import Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import Unauthenticated
from core.security import decode_access_token
from database.engine import get_db
from database.models.users import User

logger = logging.getLogger(__name__)

# Public endpoints that don't require authentication
PUBLIC_ENDPOINTS = [
    "/",
    "/health",
    "/ready",
    "/docs",
    "/redoc",
    "/openapi.json",
]


class AuthenticationError(Exception):
    """Base exception for authentication errors."""
    pass


class TokenExpiredError(AuthenticationError):
    """Raised when JWT token has expired."""
    pass


class TokenInvalidError(AuthenticationError):
    """Raised when JWT token is missing or invalid."""
    pass


class AuthenticationMiddleware:
    """
    Authentication middleware that validates bearer tokens.

    Features:
    - JWT token validation
    - Public endpoint allow-list
    - Request context injection (``scope["jwt_payload"]``)
    """

    def __init__(
        self,
        app: Callable,
        jwt_secret: Optional[str] = None,
        jwt_algorithm: Optional[str] = None,
    ):
        """
        Initialize authentication middleware.

        Args:
            app: ASGI application
            jwt_secret: Secret key for JWT verification (defaults to settings)
            jwt_algorithm: JWT signing algorithm (defaults to settings)
        """
        self.app = app
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)

        if self._is_public_endpoint(request.url.path):
            await self.app(scope, receive, send)
            return

        try:
            token = self._extract_token(request)
            if not token:
                raise TokenInvalidError("No authentication token provided")

            try:
                payload = decode_access_token(
                    token, self.jwt_secret, self.jwt_algorithm
                )
            except jwt.ExpiredSignatureError:
                raise TokenExpiredError("Token has expired")
            except jwt.InvalidTokenError as e:
                raise TokenInvalidError(f"Invalid token: {str(e)}")

            if not payload.get("user_id"):
                raise TokenInvalidError("Token missing user_id")

        except TokenExpiredError:
            await self._send_error_response(
                scope, receive, send,
                code="TOKEN_EXPIRED",
                message="Authentication token has expired.",
            )
            return
        except TokenInvalidError as e:
            logger.warning(f"Rejected request to {request.url.path}: {str(e)}")
            await self._send_error_response(
                scope, receive, send,
                code="UNAUTHENTICATED",
                message="Authentication required.",
            )
            return

        scope["jwt_payload"] = payload
        await self.app(scope, receive, send)

    def _is_public_endpoint(self, path: str) -> bool:
        if path in PUBLIC_ENDPOINTS:
            return True

        public_prefixes = ["/health", "/docs", "/redoc", "/openapi"]
        return any(path.startswith(prefix) for prefix in public_prefixes)

    def _extract_token(self, request: Request) -> Optional[str]:
        auth_header = request.headers.get("Authorization")

        if auth_header and auth_header.startswith("Bearer "):
            return auth_header[7:]

        return None

    async def _send_error_response(
        self,
        scope: dict,
        receive: Callable,
        send: Callable,
        code: str,
        message: str,
    ) -> None:
        response = JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={
                "error": {
                    "code": code,
                    "message": message,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                }
            },
            headers={"WWW-Authenticate": "Bearer"},
        )
        await response(scope, receive, send)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Load the authenticated user for the current request.

    Raises:
        Unauthenticated: If no verified token is present, or the user is
            missing or inactive
    """
    payload = request.scope.get("jwt_payload")
    if not payload:
        raise Unauthenticated("Authentication required")

    result = await db.execute(select(User).where(User.id == payload["user_id"]))
    user = result.scalar_one_or_none()

    if not user:
        logger.warning(f"Token for unknown user {payload['user_id']}")
        raise Unauthenticated("User account not found")

    if not user.is_active:
        logger.warning(f"Inactive user {user.id} attempted access")
        raise Unauthenticated("User account is inactive")

    return user
