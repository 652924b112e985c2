"""Job service functions."""

from typing import Any, Dict, Optional
import logging

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import InvalidReference, InvalidStatus, NotFound
from core.middleware.authorization import check_job_permission, check_permission
from core.utils.datetime import ensure_utc, now
from core.utils.sla import calculate_sla_progress, compute_sla_deadline
from database.models.companies import Client, Company, CostCenter
from database.models.jobs import ContractType, Job, JobStatus, Profession
from database.models.permissions import Permission, RolePermission, UserCompanyRole
from database.models.users import User

logger = logging.getLogger(__name__)

# Fields fixed at creation; silently dropped from update payloads
IMMUTABLE_JOB_FIELDS = frozenset(
    {"id", "company_id", "sla_deadline", "created_at", "created_by"}
)

# Jobs still awaiting approval are not shown to recruiters
RECRUITER_HIDDEN_STATUSES = (JobStatus.APROVADA, JobStatus.ABERTO)


def _money(value) -> Optional[float]:
    return float(value) if value is not None else None


def _timestamp(value) -> Optional[str]:
    return ensure_utc(value).isoformat() if value else None


def serialize_job(job: Job) -> Dict[str, Any]:
    """Job as a response dict, including its current SLA progress."""
    return {
        "id": job.id,
        "title": job.title,
        "description": job.description,
        "requirements": job.requirements,
        "company_id": job.company_id,
        "cost_center_id": job.cost_center_id,
        "profession_id": job.profession_id,
        "recruiter_id": job.recruiter_id,
        "client_id": job.client_id,
        "department": job.department,
        "location": job.location,
        "contract_type": job.contract_type.value,
        "salary_min": _money(job.salary_min),
        "salary_max": _money(job.salary_max),
        "status": job.status.value,
        "created_by": job.created_by,
        "created_at": _timestamp(job.created_at),
        "updated_at": _timestamp(job.updated_at),
        "sla_deadline": _timestamp(job.sla_deadline),
        "sla": calculate_sla_progress(job.created_at, job.sla_deadline).to_dict(),
    }


def parse_status(value: Any) -> JobStatus:
    """
    Validate a status against the job status enumeration.

    Raises:
        InvalidStatus: If the value is not a known status
    """
    try:
        return JobStatus(value)
    except ValueError:
        raise InvalidStatus(f"Invalid job status: {value}")


async def _require_active_profession(db: AsyncSession, profession_id: Optional[int]) -> None:
    if not profession_id:
        raise InvalidReference("profession_id is required")

    result = await db.execute(
        select(Profession.is_active).where(Profession.id == profession_id)
    )
    is_active = result.scalar_one_or_none()
    if not is_active:
        raise InvalidReference(f"Profession {profession_id} not found or inactive")


async def _require_company(db: AsyncSession, company_id: Optional[int]) -> None:
    if not company_id:
        raise InvalidReference("company_id is required")

    result = await db.execute(select(Company.id).where(Company.id == company_id))
    if result.scalar_one_or_none() is None:
        raise InvalidReference(f"Company {company_id} not found")


async def _require_cost_center(
    db: AsyncSession, company_id: int, cost_center_id: Optional[int]
) -> None:
    if cost_center_id is None:
        return

    result = await db.execute(
        select(CostCenter.company_id).where(CostCenter.id == cost_center_id)
    )
    owner = result.scalar_one_or_none()
    if owner != company_id:
        raise InvalidReference(
            f"Cost center {cost_center_id} does not belong to company {company_id}"
        )


async def _require_client(
    db: AsyncSession, company_id: int, client_id: Optional[int]
) -> None:
    if client_id is None:
        return

    result = await db.execute(
        select(Client.company_id).where(
            Client.id == client_id, Client.is_active.is_(True)
        )
    )
    owner = result.scalar_one_or_none()
    if owner != company_id:
        raise InvalidReference(
            f"Client {client_id} not found or inactive in company {company_id}"
        )


async def create_job(db: AsyncSession, user: User, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a job in a company.

    All references are validated and the caller's ``create_jobs`` permission
    checked before anything is written. The SLA deadline is fixed here.

    Args:
        db: Database session
        user: Acting user
        data: Job fields

    Returns:
        The created job

    Raises:
        InvalidReference: Missing/inactive profession, missing company, or
            a cost center or client from another company
        Forbidden: If the user lacks ``create_jobs`` in the company
    """
    data = dict(data)
    company_id = data.pop("company_id", None)

    await _require_active_profession(db, data.get("profession_id"))
    await _require_company(db, company_id)
    await check_permission(db, user, company_id, Permission.CREATE_JOBS)
    await _require_cost_center(db, company_id, data.get("cost_center_id"))
    await _require_client(db, company_id, data.get("client_id"))

    for field in IMMUTABLE_JOB_FIELDS:
        data.pop(field, None)

    status = parse_status(data.pop("status", None) or JobStatus.DRAFT)
    if data.get("contract_type") is not None:
        data["contract_type"] = ContractType(data["contract_type"])
    else:
        data.pop("contract_type", None)

    created_at = now()
    job = Job(
        **data,
        company_id=company_id,
        status=status,
        created_by=user.id,
        created_at=created_at,
        updated_at=created_at,
        sla_deadline=compute_sla_deadline(created_at),
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)

    logger.info(f"User {user.id} created job {job.id} in company {company_id}")
    return serialize_job(job)


async def get_job(db: AsyncSession, user: User, job_id: int) -> Dict[str, Any]:
    """
    Get job details with SLA progress.

    Global admins can read any job; everyone else needs ``view_jobs`` in the
    job's company. Jobs hidden from recruiters are reported as missing.
    """
    if user.is_admin:
        result = await db.execute(select(Job).where(Job.id == job_id))
        job = result.scalar_one_or_none()
        if not job:
            raise NotFound(f"Job {job_id} not found")
    else:
        job = await check_job_permission(db, user, job_id, Permission.VIEW_JOBS)

    if user.is_recruiter and job.status in RECRUITER_HIDDEN_STATUSES:
        raise NotFound(f"Job {job_id} not found")

    return serialize_job(job)


def _viewable_companies(user_id: int):
    return (
        select(UserCompanyRole.company_id)
        .join(RolePermission, RolePermission.role == UserCompanyRole.role)
        .where(
            UserCompanyRole.user_id == user_id,
            UserCompanyRole.is_active.is_(True),
            RolePermission.permission == Permission.VIEW_JOBS,
            RolePermission.is_granted.is_(True),
        )
    )


async def list_jobs(
    db: AsyncSession,
    user: User,
    limit: int = 50,
    offset: int = 0,
    search: Optional[str] = None,
    status: Optional[str] = None,
    company_id: Optional[int] = None,
    profession_id: Optional[int] = None,
) -> Dict[str, Any]:
    """
    List jobs visible to a user.

    Non-admins only see companies where they hold ``view_jobs``. Recruiters
    never see jobs in ``aprovada`` or ``aberto``; that predicate is part of
    the query so ``total``, ``limit`` and ``offset`` stay consistent.
    """
    query = select(Job)

    if not user.is_admin:
        query = query.where(Job.company_id.in_(_viewable_companies(user.id)))

    if user.is_recruiter:
        query = query.where(Job.status.not_in(RECRUITER_HIDDEN_STATUSES))

    if status:
        query = query.where(Job.status == parse_status(status))

    if company_id is not None:
        query = query.where(Job.company_id == company_id)

    if profession_id is not None:
        query = query.where(Job.profession_id == profession_id)

    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                Job.title.ilike(pattern),
                Job.description.ilike(pattern),
                Job.location.ilike(pattern),
            )
        )

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    query = query.order_by(Job.created_at.desc(), Job.id.desc())
    query = query.limit(limit).offset(offset)

    result = await db.execute(query)
    jobs = result.scalars().all()

    return {
        "jobs": [serialize_job(job) for job in jobs],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


async def update_job(
    db: AsyncSession,
    user: User,
    job_id: int,
    data: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Update a job.

    The company is always resolved from the stored job and ``edit_jobs`` is
    required there. Immutable fields in ``data`` are discarded, so a job can
    never be moved to another company through this path.

    Raises:
        NotFound: If the job doesn't exist
        Forbidden: If the user lacks ``edit_jobs`` in the job's company
        InvalidReference: If a new profession, cost center or client is invalid
        InvalidStatus: If a new status is unknown
    """
    job = await check_job_permission(db, user, job_id, Permission.EDIT_JOBS)

    changes = {
        field: value for field, value in data.items()
        if field not in IMMUTABLE_JOB_FIELDS
    }

    if "title" in changes and not changes["title"]:
        del changes["title"]
    if "profession_id" in changes:
        await _require_active_profession(db, changes["profession_id"])
    if "cost_center_id" in changes:
        await _require_cost_center(db, job.company_id, changes["cost_center_id"])
    if "client_id" in changes:
        await _require_client(db, job.company_id, changes["client_id"])
    if "status" in changes:
        changes["status"] = parse_status(changes["status"])
    if "contract_type" in changes:
        if changes["contract_type"] is None:
            del changes["contract_type"]
        else:
            changes["contract_type"] = ContractType(changes["contract_type"])

    for field, value in changes.items():
        setattr(job, field, value)

    await db.commit()
    await db.refresh(job)

    logger.info(f"User {user.id} updated job {job.id}: {sorted(changes)}")
    return serialize_job(job)


async def update_job_status(
    db: AsyncSession,
    user: User,
    job_id: int,
    status: str,
) -> Dict[str, Any]:
    """
    Move a job to another status.

    Any status may follow any other; only membership in the enumeration is
    checked, before the permission check.
    """
    new_status = parse_status(status)
    return await update_job(db, user, job_id, {"status": new_status})


async def delete_job(db: AsyncSession, user: User, job_id: int) -> None:
    """Delete a job; requires ``delete_jobs`` in the job's company."""
    job = await check_job_permission(db, user, job_id, Permission.DELETE_JOBS)

    await db.delete(job)
    await db.commit()

    logger.info(f"User {user.id} deleted job {job_id}")
