"""FastAPI dependencies for dependency injection."""

from fastapi import Depends, Query

from core.exceptions import Forbidden
from core.middleware.authentication import get_current_user
from database.models.users import User, UserRole


async def require_admin_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Require the global ``admin`` role of record."""
    if current_user.role != UserRole.ADMIN:
        raise Forbidden("Admin access required")
    return current_user


def get_pagination_params(
    limit: int = Query(50, ge=1, le=200, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip"),
) -> dict:
    """
    Get pagination parameters.

    Returns:
        Dictionary with offset and limit
    """
    return {"offset": offset, "limit": limit}
