"""
Authorization checks for company-scoped permissions.

This module implements:
1. The default role -> permission matrix
2. Permission aggregation over a user's active role assignments
3. Job-scoped checks that resolve the job's owning company first
4. FastAPI dependencies for route-level permission requirements

A user may hold several roles in a company; the effective permission set
is the union of the grants of every active role. There is no deny
override: a role without a grant simply contributes nothing.
"""

import logging
from typing import Callable, Optional, Set

from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import Forbidden, NotFound
from core.middleware.authentication import get_current_user
from database.engine import get_db
from database.models.jobs import Job
from database.models.permissions import (
    Permission,
    Role,
    RolePermission,
    UserCompanyRole,
)
from database.models.users import User

logger = logging.getLogger(__name__)


# Role to permission mapping seeded into role_permissions
DEFAULT_ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.ADMIN: frozenset(Permission),
    Role.HR_MANAGER: frozenset({
        Permission.CREATE_JOBS, Permission.EDIT_JOBS,
        Permission.DELETE_JOBS, Permission.VIEW_JOBS,
        Permission.VIEW_COMPANIES, Permission.MANAGE_COST_CENTERS,
        Permission.VIEW_APPLICATIONS, Permission.MANAGE_APPLICATIONS,
        Permission.INTERVIEW_CANDIDATES, Permission.HIRE_CANDIDATES,
        Permission.VIEW_REPORTS, Permission.EXPORT_DATA,
    }),
    Role.RECRUITER: frozenset({
        Permission.CREATE_JOBS, Permission.EDIT_JOBS, Permission.VIEW_JOBS,
        Permission.VIEW_COMPANIES,
        Permission.VIEW_APPLICATIONS, Permission.MANAGE_APPLICATIONS,
        Permission.INTERVIEW_CANDIDATES,
        Permission.VIEW_REPORTS,
    }),
    Role.INTERVIEWER: frozenset({
        Permission.VIEW_JOBS,
        Permission.VIEW_COMPANIES,
        Permission.VIEW_APPLICATIONS,
        Permission.INTERVIEW_CANDIDATES,
    }),
    Role.VIEWER: frozenset({
        # Read only
        Permission.VIEW_JOBS,
        Permission.VIEW_COMPANIES,
        Permission.VIEW_APPLICATIONS,
        Permission.VIEW_REPORTS,
    }),
    # Assignable, but no default grants
    Role.APPROVER: frozenset(),
    Role.MANAGER: frozenset(),
}


def _granted_permissions_query(user_id: int, company_id: int):
    """Active assignments joined to granted permissions in one statement."""
    return (
        select(RolePermission.permission)
        .join(UserCompanyRole, UserCompanyRole.role == RolePermission.role)
        .where(
            UserCompanyRole.user_id == user_id,
            UserCompanyRole.company_id == company_id,
            UserCompanyRole.is_active.is_(True),
            RolePermission.is_granted.is_(True),
        )
        .distinct()
    )


async def get_user_permissions(
    db: AsyncSession,
    user_id: Optional[int],
    company_id: Optional[int],
) -> Set[Permission]:
    """
    Get all permissions a user holds in a company.

    Args:
        db: Database session
        user_id: User ID
        company_id: Company ID

    Returns:
        Union of the grants of every active role; empty when the user has
        no active assignment in the company
    """
    if user_id is None or company_id is None:
        return set()

    result = await db.execute(_granted_permissions_query(user_id, company_id))
    return {Permission(value) for value in result.scalars().all()}


async def has_permission(
    db: AsyncSession,
    user_id: Optional[int],
    company_id: Optional[int],
    permission: Permission | str,
) -> bool:
    """
    Check whether a user may exercise ``permission`` in a company.

    Unknown users, companies and permission names yield ``False``. Storage
    errors propagate so callers can tell a denial from an infrastructure
    failure.
    """
    try:
        permission = Permission(permission)
    except ValueError:
        logger.warning(f"Permission check for unknown permission {permission!r}")
        return False
    if user_id is None or company_id is None:
        return False

    result = await db.execute(
        _granted_permissions_query(user_id, company_id)
        .where(RolePermission.permission == permission)
        .limit(1)
    )
    return result.first() is not None


async def check_permission(
    db: AsyncSession,
    user: User,
    company_id: int,
    required_permission: Permission,
) -> None:
    """
    Require a permission in a company.

    Raises:
        Forbidden: If user lacks permission
    """
    if await has_permission(db, user.id, company_id, required_permission):
        return

    logger.warning(
        f"User {user.id} lacks permission {required_permission.value} "
        f"in company {company_id}"
    )
    raise Forbidden(f"Insufficient permissions: {required_permission.value}")


async def check_job_permission(
    db: AsyncSession,
    user: User,
    job_id: int,
    required_permission: Permission,
) -> Job:
    """
    Resolve a job's owning company and require a permission there.

    The company always comes from the stored job, never from the request.

    Args:
        db: Database session
        user: Acting user
        job_id: Job ID
        required_permission: Required permission

    Returns:
        The loaded job

    Raises:
        NotFound: If the job doesn't exist
        Forbidden: If user lacks permission in the job's company
    """
    result = await db.execute(select(Job).where(Job.id == job_id))
    job = result.scalar_one_or_none()

    if not job:
        raise NotFound(f"Job {job_id} not found")

    await check_permission(db, user, job.company_id, required_permission)
    return job


def require_permission(
    required_permission: Permission,
    company_id_param: str = "company_id",
) -> Callable:
    """
    Dependency to require a permission in the company named by a path or
    query parameter.

    Args:
        required_permission: Required permission
        company_id_param: Parameter name for company ID

    Returns:
        FastAPI dependency returning the authorized user
    """
    async def dependency(
        request: Request,
        current_user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
    ) -> User:
        raw_company_id = request.path_params.get(
            company_id_param
        ) or request.query_params.get(company_id_param)

        if not raw_company_id:
            raise ValueError(f"Missing parameter: {company_id_param}")

        try:
            company_id = int(raw_company_id)
        except ValueError:
            raise ValueError(f"Invalid parameter: {company_id_param}")

        await check_permission(db, current_user, company_id, required_permission)
        return current_user

    return dependency
