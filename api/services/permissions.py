"""
Role capability table and role assignment store.

Grants live in ``role_permissions``; assignments in ``user_company_roles``.
Permission checks themselves are in ``core.middleware.authorization``.
"""

from typing import Iterable, List, Mapping, Optional, Set
import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import NotFound
from core.middleware.authorization import DEFAULT_ROLE_PERMISSIONS
from database.models.permissions import (
    Permission,
    Role,
    RolePermission,
    UserCompanyRole,
)

logger = logging.getLogger(__name__)


# ==================== Role capability table ===================== #

def _matrix_rows(matrix: Mapping[Role, Iterable[Permission]]) -> List[dict]:
    return [
        {"role": role, "permission": permission, "is_granted": True}
        for role, permissions in matrix.items()
        for permission in permissions
    ]


async def reseed_defaults(
    db: AsyncSession,
    matrix: Optional[Mapping[Role, Iterable[Permission]]] = None,
) -> int:
    """
    Replace every grant row with the default matrix.

    Delete and insert run in a single transaction: readers never observe
    an empty table, and a failed insert leaves the previous grants intact.
    Custom grants are discarded.

    Args:
        db: Database session
        matrix: Grant matrix to install (defaults to DEFAULT_ROLE_PERMISSIONS)

    Returns:
        Number of grant rows written
    """
    rows = _matrix_rows(matrix if matrix is not None else DEFAULT_ROLE_PERMISSIONS)

    try:
        await db.execute(delete(RolePermission))
        await db.execute(insert(RolePermission), rows)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.error("Reseeding role permissions failed, previous grants kept")
        raise

    logger.info(f"Reseeded {len(rows)} role permission grants")
    return len(rows)


async def grants_for(db: AsyncSession, role: Role | str) -> Set[Permission]:
    """Permissions granted to ``role``; an unknown role grants nothing."""
    try:
        role = Role(role)
    except ValueError:
        return set()

    result = await db.execute(
        select(RolePermission.permission).where(
            RolePermission.role == role,
            RolePermission.is_granted.is_(True),
        )
    )
    return {Permission(value) for value in result.scalars().all()}


async def list_role_permissions(db: AsyncSession) -> List[RolePermission]:
    """Full grant table ordered by role then permission."""
    result = await db.execute(
        select(RolePermission).order_by(
            RolePermission.role, RolePermission.permission
        )
    )
    return list(result.scalars().all())


# ==================== Role assignment store ===================== #

async def assign(
    db: AsyncSession,
    user_id: int,
    company_id: int,
    role: Role,
    cost_center_id: Optional[int] = None,
) -> UserCompanyRole:
    """
    Give a user a role in a company.

    Always inserts a new active row; holding the same role twice is allowed
    and harmless since capabilities are a union.
    """
    assignment = UserCompanyRole(
        user_id=user_id,
        company_id=company_id,
        cost_center_id=cost_center_id,
        role=Role(role),
        is_active=True,
    )
    db.add(assignment)
    await db.commit()
    await db.refresh(assignment)

    logger.info(
        f"Assigned role {assignment.role.value} to user {user_id} "
        f"in company {company_id}"
    )
    return assignment


async def deactivate(db: AsyncSession, user_id: int, company_id: int) -> int:
    """
    Remove a user from a company by deactivating every assignment there.

    Rows are kept for history. Returns the number of assignments affected.
    """
    result = await db.execute(
        update(UserCompanyRole)
        .where(
            UserCompanyRole.user_id == user_id,
            UserCompanyRole.company_id == company_id,
            UserCompanyRole.is_active.is_(True),
        )
        .values(is_active=False)
        .execution_options(synchronize_session="fetch")
    )
    await db.commit()

    logger.info(
        f"Deactivated {result.rowcount} assignments of user {user_id} "
        f"in company {company_id}"
    )
    return result.rowcount


async def list_active(
    db: AsyncSession,
    user_id: int,
    company_id: Optional[int] = None,
) -> List[UserCompanyRole]:
    """Active assignments of a user, optionally within one company."""
    query = select(UserCompanyRole).where(
        UserCompanyRole.user_id == user_id,
        UserCompanyRole.is_active.is_(True),
    )
    if company_id is not None:
        query = query.where(UserCompanyRole.company_id == company_id)

    result = await db.execute(
        query.order_by(UserCompanyRole.created_at, UserCompanyRole.id)
    )
    return list(result.scalars().all())


async def get_assignment(db: AsyncSession, assignment_id: int) -> UserCompanyRole:
    result = await db.execute(
        select(UserCompanyRole).where(UserCompanyRole.id == assignment_id)
    )
    assignment = result.scalar_one_or_none()
    if not assignment:
        raise NotFound(f"Role assignment {assignment_id} not found")
    return assignment


async def update_role(
    db: AsyncSession,
    assignment_id: int,
    role: Role,
) -> UserCompanyRole:
    """
    Change the role held by an existing assignment.

    Raises:
        NotFound: If the assignment doesn't exist
    """
    assignment = await get_assignment(db, assignment_id)
    previous = assignment.role
    assignment.role = Role(role)
    await db.commit()
    await db.refresh(assignment)

    logger.info(
        f"Assignment {assignment_id} role changed "
        f"{previous.value} -> {assignment.role.value}"
    )
    return assignment
