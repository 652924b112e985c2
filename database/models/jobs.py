"""
Jobs Module

Job postings, their status enumeration and the profession catalogue
they are classified under.
"""

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import (
    String,
    Boolean,
    ForeignKey,
    BigInteger,
    DateTime,
    Text,
    Numeric,
    Index,
)
from database.engine import Base, BigIntegerPK, str_enum
from core.utils.datetime import now
from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum


# ==================== Job Enums ===================== #
class JobStatus(str, PyEnum):
    """Job posting status."""

    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    CLOSED = "closed"
    EXPIRED = "expired"
    ABERTO = "aberto"  # open for applications
    APROVADA = "aprovada"  # approved for recruiting
    EM_RECRUTAMENTO = "em_recrutamento"  # recruiting in progress
    EM_DOCUMENTACAO = "em_documentacao"  # candidate selected, paperwork
    DP = "dp"  # with the personnel department
    EM_MOBILIZACAO = "em_mobilizacao"  # candidate being mobilized
    CANCELADA = "cancelada"


class ContractType(str, PyEnum):
    """Employment contract type."""

    CLT = "clt"
    PJ = "pj"
    FREELANCER = "freelancer"
    ESTAGIO = "estagio"
    TEMPORARIO = "temporario"


class Profession(Base):
    """
    Profession catalogue entry. Only active professions can be used on
    new jobs.
    """

    __tablename__: str = "professions"
    id: Mapped[int] = mapped_column(
        BigIntegerPK, primary_key=True, nullable=False, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(String(100), index=True)
    description: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now, onupdate=now
    )


class Job(Base):
    """
    Job posting owned by exactly one company.

    ``company_id`` and ``sla_deadline`` are fixed at creation; the service
    layer strips them from update payloads.
    """

    __tablename__: str = "jobs"
    id: Mapped[int] = mapped_column(
        BigIntegerPK, primary_key=True, nullable=False, autoincrement=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    requirements: Mapped[str | None] = mapped_column(Text)

    # Ownership and references
    company_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("companies.id"), nullable=False
    )
    cost_center_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("cost_centers.id", ondelete="SET NULL")
    )
    profession_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("professions.id"), nullable=False
    )
    recruiter_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="SET NULL")
    )
    client_id: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("clients.id", ondelete="SET NULL")
    )
    created_by: Mapped[int | None] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="SET NULL")
    )

    # Posting details
    department: Mapped[str | None] = mapped_column(String(255))
    location: Mapped[str | None] = mapped_column(String(255))
    contract_type: Mapped[ContractType] = mapped_column(
        str_enum(ContractType), nullable=False, default=ContractType.CLT
    )
    salary_min: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    salary_max: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    # Lifecycle
    status: Mapped[JobStatus] = mapped_column(
        str_enum(JobStatus), nullable=False, default=JobStatus.DRAFT
    )
    sla_deadline: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now, onupdate=now
    )

    __table_args__ = (
        Index("idx_job_company_status", "company_id", "status"),
        Index("idx_job_profession", "profession_id"),
        Index("idx_job_created", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Job id={self.id} company={self.company_id} status={self.status}>"
