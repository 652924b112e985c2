"""
Company-scoped role and permission management endpoints.

Static paths are declared before ``/{company_id}`` so they are not
captured by it.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_admin_user
from api.schemas.permissions import (
    AssignRoleRequest,
    AssignmentResponse,
    RolePermissionResponse,
    SetupDefaultsResponse,
    UpdateRoleRequest,
)
from api.services import permissions as permission_service
from core.middleware.authentication import get_current_user
from core.middleware.authorization import check_permission, get_user_permissions
from database.engine import get_db
from database.models.permissions import Permission
from database.models.users import User

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get(
    "/user-roles",
    response_model=List[AssignmentResponse],
    summary="My Role Assignments",
    description="List the caller's active role assignments across all companies.",
)
async def get_my_roles(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await permission_service.list_active(db, current_user.id)


@router.get(
    "/roles/permissions",
    response_model=List[RolePermissionResponse],
    summary="Role Permission Matrix",
    description="List every role -> permission grant.",
)
async def get_role_permissions(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await permission_service.list_role_permissions(db)


@router.post(
    "/assign",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign Role",
    description="Give a user a role in a company. Requires manage_permissions in that company.",
)
async def assign_role(
    payload: AssignRoleRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await check_permission(
        db, current_user, payload.company_id, Permission.MANAGE_PERMISSIONS
    )
    return await permission_service.assign(
        db,
        user_id=payload.user_id,
        company_id=payload.company_id,
        role=payload.role,
        cost_center_id=payload.cost_center_id,
    )


@router.post(
    "/setup-defaults",
    response_model=SetupDefaultsResponse,
    summary="Reset Default Grants",
    description=(
        "Replace the whole grant table with the default matrix. "
        "Discards custom grants. System administrators only."
    ),
)
async def setup_defaults(
    current_user: User = Depends(require_admin_user),
    db: AsyncSession = Depends(get_db),
):
    count = await permission_service.reseed_defaults(db)
    return SetupDefaultsResponse(
        message="Default role permissions installed", grants=count
    )


@router.put(
    "/{assignment_id}/role",
    response_model=AssignmentResponse,
    summary="Change Assignment Role",
    description="Change the role of an assignment. Requires manage_permissions in the assignment's company.",
)
async def update_assignment_role(
    payload: UpdateRoleRequest,
    assignment_id: int = Path(..., description="Role assignment ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    assignment = await permission_service.get_assignment(db, assignment_id)
    await check_permission(
        db, current_user, assignment.company_id, Permission.MANAGE_PERMISSIONS
    )
    return await permission_service.update_role(db, assignment_id, payload.role)


@router.delete(
    "/{user_id}/{company_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Remove User From Company",
    description="Deactivate all of a user's roles in a company. Requires manage_permissions.",
)
async def remove_user_from_company(
    user_id: int = Path(..., description="User ID"),
    company_id: int = Path(..., description="Company ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await check_permission(db, current_user, company_id, Permission.MANAGE_PERMISSIONS)
    await permission_service.deactivate(db, user_id, company_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{company_id}",
    response_model=List[Permission],
    summary="My Permissions",
    description="List the caller's effective permissions in a company.",
)
async def get_my_permissions(
    company_id: int = Path(..., description="Company ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    permissions = await get_user_permissions(db, current_user.id, company_id)
    return sorted(permissions, key=lambda p: p.value)
