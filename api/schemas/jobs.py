"""Job request and response schemas."""

from typing import Optional
from pydantic import BaseModel, Field

from database.models.jobs import ContractType


class JobBase(BaseModel):
    """Fields shared by create and response payloads."""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    requirements: Optional[str] = None
    department: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    cost_center_id: Optional[int] = None
    recruiter_id: Optional[int] = None
    client_id: Optional[int] = None


class JobCreate(JobBase):
    """
    Payload for creating a job.

    ``company_id`` and ``profession_id`` are checked by the service so a
    missing value is reported as an invalid reference.
    """

    company_id: Optional[int] = None
    profession_id: Optional[int] = None
    contract_type: Optional[ContractType] = None
    status: Optional[str] = Field(None, description="Initial status, defaults to draft")


class JobUpdate(BaseModel):
    """
    Payload for updating a job. All fields optional.

    ``company_id`` is accepted for client compatibility but never applied.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    requirements: Optional[str] = None
    department: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    salary_min: Optional[float] = Field(None, ge=0)
    salary_max: Optional[float] = Field(None, ge=0)
    cost_center_id: Optional[int] = None
    recruiter_id: Optional[int] = None
    client_id: Optional[int] = None
    profession_id: Optional[int] = None
    contract_type: Optional[ContractType] = None
    status: Optional[str] = None
    company_id: Optional[int] = None


class JobStatusUpdate(BaseModel):
    """Payload for a status-only update."""

    status: str = Field(..., description="Target job status")


class SLAResponse(BaseModel):
    """SLA progress at the time of the request."""

    days_passed: int
    days_remaining: int
    percentage: int = Field(ge=0, le=100)
    is_overdue: bool
    deadline: str


class JobResponse(JobBase):
    """Job details."""

    id: int
    company_id: int
    profession_id: int
    contract_type: ContractType
    status: str
    created_by: Optional[int] = None
    created_at: str
    updated_at: str
    sla_deadline: str
    sla: SLAResponse


class JobListResponse(BaseModel):
    """Page of jobs."""

    jobs: list[JobResponse]
    total: int = Field(ge=0)
    limit: int
    offset: int
