"""
Access token utilities.

Tokens are opaque to the rest of the system: the authentication
middleware turns a valid bearer token into a payload carrying
``user_id``, and route dependencies load the user from it.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

import jwt

from core.config import settings
from core.utils.datetime import now

logger = logging.getLogger("security.tokens")


def create_access_token(
    user_id: int,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_id: ID of the authenticated user
        expires_delta: Token lifetime (defaults to settings)
        extra_claims: Additional claims to embed

    Returns:
        Encoded JWT
    """
    issued_at = now()
    expires_at = issued_at + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload: Dict[str, Any] = {
        "user_id": user_id,
        "type": "access",
        "iat": issued_at,
        "exp": expires_at,
    }
    if extra_claims:
        payload.update(extra_claims)

    return jwt.encode(
        payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
    )


def decode_access_token(
    token: str,
    secret: Optional[str] = None,
    algorithm: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Verify and decode an access token.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the token is malformed or has a bad signature
    """
    payload = jwt.decode(
        token,
        secret or settings.jwt_secret_key,
        algorithms=[algorithm or settings.jwt_algorithm],
    )
    if payload.get("type") != "access":
        raise jwt.InvalidTokenError("Not an access token")
    return payload
