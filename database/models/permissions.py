"""
Permissions Module

Company-scoped role assignments and the role -> permission grant table.
"""

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    Boolean,
    ForeignKey,
    BigInteger,
    DateTime,
    Index,
    UniqueConstraint,
)
from database.engine import Base, BigIntegerPK, str_enum
from core.utils.datetime import now
from datetime import datetime
from enum import Enum as PyEnum


# ==================== Enums ===================== #
class Role(str, PyEnum):
    """Roles a user can hold inside a company."""

    ADMIN = "admin"
    HR_MANAGER = "hr_manager"
    RECRUITER = "recruiter"
    INTERVIEWER = "interviewer"
    VIEWER = "viewer"
    APPROVER = "approver"
    MANAGER = "manager"


class Permission(str, PyEnum):
    """Capabilities a role may grant."""

    # Jobs
    CREATE_JOBS = "create_jobs"
    EDIT_JOBS = "edit_jobs"
    DELETE_JOBS = "delete_jobs"
    VIEW_JOBS = "view_jobs"

    # Companies
    CREATE_COMPANIES = "create_companies"
    EDIT_COMPANIES = "edit_companies"
    DELETE_COMPANIES = "delete_companies"
    VIEW_COMPANIES = "view_companies"
    MANAGE_COST_CENTERS = "manage_cost_centers"

    # Applications / candidates
    VIEW_APPLICATIONS = "view_applications"
    MANAGE_APPLICATIONS = "manage_applications"
    INTERVIEW_CANDIDATES = "interview_candidates"
    HIRE_CANDIDATES = "hire_candidates"

    # Reporting
    VIEW_REPORTS = "view_reports"
    EXPORT_DATA = "export_data"

    # Administration
    MANAGE_USERS = "manage_users"
    MANAGE_PERMISSIONS = "manage_permissions"


class UserCompanyRole(Base):
    """
    A user holding a role in a company, optionally narrowed to a cost center.

    Rows are never deleted; removing a user from a company flips
    ``is_active``. Several rows for the same (user, company, role) are
    allowed, capabilities are a union.
    """

    __tablename__: str = "user_company_roles"
    id: Mapped[int] = mapped_column(
        BigIntegerPK, primary_key=True, nullable=False, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    company_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    # Advisory only: not consulted by permission checks
    cost_center_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("cost_centers.id", ondelete="SET NULL"), nullable=True
    )
    role: Mapped[Role] = mapped_column(
        str_enum(Role), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now, onupdate=now
    )

    __table_args__ = (
        Index("idx_ucr_user_company_active", "user_id", "company_id", "is_active"),
        Index("idx_ucr_company", "company_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<UserCompanyRole id={self.id} user={self.user_id} "
            f"company={self.company_id} role={self.role} active={self.is_active}>"
        )


class RolePermission(Base):
    """
    One cell of the role -> permission matrix.

    The permissions granted to a role are exactly its rows with
    ``is_granted = True``.
    """

    __tablename__: str = "role_permissions"
    id: Mapped[int] = mapped_column(
        BigIntegerPK, primary_key=True, nullable=False, autoincrement=True
    )
    role: Mapped[Role] = mapped_column(
        str_enum(Role), nullable=False
    )
    permission: Mapped[Permission] = mapped_column(
        str_enum(Permission), nullable=False
    )
    is_granted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )

    __table_args__ = (
        UniqueConstraint("role", "permission", name="uq_role_permission"),
        Index("idx_role_permission_role_granted", "role", "is_granted"),
    )
