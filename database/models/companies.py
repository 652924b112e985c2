"""
Companies Module

Companies are the tenant boundary: jobs, cost centers, clients and role
assignments all belong to exactly one company.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    Boolean,
    String,
    ForeignKey,
    BigInteger,
    DateTime,
    Text,
    Numeric,
    Index,
)
from database.engine import Base, BigIntegerPK
from core.utils.datetime import now
from datetime import datetime
from decimal import Decimal


class Company(Base):
    """
    Company (tenant) using the platform.
    """

    __tablename__: str = "companies"
    id: Mapped[int] = mapped_column(
        BigIntegerPK, primary_key=True, nullable=False, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    website: Mapped[str | None] = mapped_column(String(255))
    industry_type: Mapped[str | None] = mapped_column(String(50))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now, onupdate=now
    )

    # Relationships
    cost_centers: Mapped[list["CostCenter"]] = relationship(
        "CostCenter",
        back_populates="company",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<Company id={self.id} name={self.name!r}>"


class CostCenter(Base):
    """
    Optional sub-scope of a company used for budgeting jobs.
    """

    __tablename__: str = "cost_centers"
    id: Mapped[int] = mapped_column(
        BigIntegerPK, primary_key=True, nullable=False, autoincrement=True
    )
    company_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    budget: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now, onupdate=now
    )

    company: Mapped["Company"] = relationship(
        "Company", back_populates="cost_centers", lazy="raise"
    )

    __table_args__ = (Index("idx_cost_center_company", "company_id"),)


class Client(Base):
    """
    End client a company recruits for.

    Clients are never removed; deleting one clears ``is_active`` so jobs
    that already reference it keep their history.
    """

    __tablename__: str = "clients"
    id: Mapped[int] = mapped_column(
        BigIntegerPK, primary_key=True, nullable=False, autoincrement=True
    )
    company_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_person: Mapped[str | None] = mapped_column(String(255))
    contact_email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(50))
    address: Mapped[str | None] = mapped_column(String(255))
    city: Mapped[str | None] = mapped_column(String(100))
    state: Mapped[str | None] = mapped_column(String(50))
    notes: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now, onupdate=now
    )

    __table_args__ = (
        Index("idx_client_company", "company_id"),
        Index("idx_client_company_active", "company_id", "is_active"),
    )
