"""
Job posting management endpoints.

Every mutation resolves the job's company from storage before checking
permissions; the company in a payload is only trusted at creation.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_pagination_params
from api.schemas.jobs import (
    JobCreate,
    JobListResponse,
    JobResponse,
    JobStatusUpdate,
    JobUpdate,
)
from api.services import jobs as job_service
from core.middleware.authentication import get_current_user
from database.engine import get_db
from database.models.users import User

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get(
    "",
    response_model=JobListResponse,
    summary="List Jobs",
    description=(
        "List job postings in companies where the caller holds view_jobs. "
        "Recruiters do not see jobs in 'aprovada' or 'aberto'."
    ),
)
async def list_jobs(
    search: Optional[str] = Query(None, description="Search title, description and location"),
    status: Optional[str] = Query(None, description="Filter by status"),
    company_id: Optional[int] = Query(None, description="Filter by company"),
    profession_id: Optional[int] = Query(None, description="Filter by profession"),
    pagination: dict = Depends(get_pagination_params),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Retrieve a paginated list of job postings."""
    return await job_service.list_jobs(
        db,
        current_user,
        limit=pagination["limit"],
        offset=pagination["offset"],
        search=search,
        status=status,
        company_id=company_id,
        profession_id=profession_id,
    )


@router.post(
    "",
    response_model=JobResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Job",
    description="Create a job posting. Requires create_jobs in the target company.",
)
async def create_job(
    payload: JobCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.create_job(db, current_user, payload.model_dump())


@router.get(
    "/{job_id}",
    response_model=JobResponse,
    summary="Get Job Details",
    description="Get a job posting with its SLA progress. Requires view_jobs.",
)
async def get_job(
    job_id: int = Path(..., description="Job ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.get_job(db, current_user, job_id)


@router.put(
    "/{job_id}",
    response_model=JobResponse,
    summary="Update Job",
    description="Update a job posting. Requires edit_jobs in the job's company.",
)
async def update_job(
    payload: JobUpdate,
    job_id: int = Path(..., description="Job ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.update_job(
        db, current_user, job_id, payload.model_dump(exclude_unset=True)
    )


@router.patch(
    "/{job_id}/status",
    response_model=JobResponse,
    summary="Change Job Status",
    description="Move a job to another status. Requires edit_jobs in the job's company.",
)
async def update_job_status(
    payload: JobStatusUpdate,
    job_id: int = Path(..., description="Job ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.update_job_status(db, current_user, job_id, payload.status)


@router.delete(
    "/{job_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Job",
    description="Delete a job posting. Requires delete_jobs in the job's company.",
)
async def delete_job(
    job_id: int = Path(..., description="Job ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await job_service.delete_job(db, current_user, job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
