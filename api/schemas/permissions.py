"""Role assignment and grant schemas."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from database.models.permissions import Permission, Role


class AssignRoleRequest(BaseModel):
    """Give a user a role in a company."""

    user_id: int = Field(..., description="User receiving the role")
    company_id: int = Field(..., description="Company the role applies to")
    role: Role
    cost_center_id: Optional[int] = Field(
        None, description="Recorded on the assignment; not used by permission checks"
    )


class UpdateRoleRequest(BaseModel):
    """Change the role of an assignment."""

    role: Role


class AssignmentResponse(BaseModel):
    """A role assignment."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    company_id: int
    cost_center_id: Optional[int] = None
    role: Role
    is_active: bool
    created_at: datetime
    updated_at: datetime


class RolePermissionResponse(BaseModel):
    """One row of the grant table."""

    model_config = ConfigDict(from_attributes=True)

    role: Role
    permission: Permission
    is_granted: bool


class SetupDefaultsResponse(BaseModel):
    message: str
    grants: int
