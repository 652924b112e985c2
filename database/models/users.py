from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    String,
    Boolean,
    DateTime,
)
from database.engine import Base, BigIntegerPK, str_enum
from core.utils.datetime import now
from datetime import datetime
from enum import Enum as PyEnum


# ==================== User Role ===================== #
class UserRole(str, PyEnum):
    """
    Global role-of-record.

    Only used for system administration checks and for the recruiter
    listing filter; company capabilities come from role assignments.
    """

    ADMIN = "admin"  # system administrator
    RECRUITER = "recruiter"  # recruiter, hidden from jobs awaiting approval
    USER = "user"  # everyone else


class User(Base):
    """
    Authenticated identity. Created by the identity provider, read-only here.
    """

    __tablename__: str = "users"
    id: Mapped[int] = mapped_column(
        BigIntegerPK, primary_key=True, nullable=False, autoincrement=True
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    role: Mapped[UserRole] = mapped_column(
        str_enum(UserRole),
        nullable=False,
        default=UserRole.USER,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now, onupdate=now
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_recruiter(self) -> bool:
        return self.role == UserRole.RECRUITER

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role}>"
