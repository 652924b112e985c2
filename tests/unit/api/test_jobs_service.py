"""
Tests for the job lifecycle service.

Tests:
- Creation: reference validation (profession, company, cost center,
  client) before any write, permission check, SLA
- Listing: company scoping, recruiter visibility filter, pagination
- Updates: immutable company, status validation
- Deletion
"""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from api.services import companies as company_service
from api.services import jobs as job_service
from core.exceptions import Forbidden, InvalidReference, InvalidStatus, NotFound
from core.utils.datetime import ensure_utc, now
from database.models.jobs import Job, JobStatus


async def _job_count(session_factory) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(Job))).scalar()


async def _load_job(session_factory, job_id: int) -> Job:
    async with session_factory() as session:
        return (await session.execute(select(Job).where(Job.id == job_id))).scalar_one()


class TestCreateJob:
    """Test job creation."""

    def _payload(self, world, **overrides):
        payload = {
            "title": "Site Engineer",
            "company_id": world.acme.id,
            "profession_id": world.developer.id,
        }
        payload.update(overrides)
        return payload

    @pytest.mark.asyncio
    async def test_creates_draft_with_sla(self, db, world):
        job = await job_service.create_job(db, world.hr, self._payload(world))

        assert job["status"] == "draft"
        assert job["company_id"] == world.acme.id
        assert job["created_by"] == world.hr.id
        assert job["sla"]["days_passed"] == 0
        assert job["sla"]["percentage"] == 0
        assert job["sla"]["is_overdue"] is False

    @pytest.mark.asyncio
    async def test_sla_deadline_is_fourteen_days_after_creation(self, db, session_factory, world):
        job = await job_service.create_job(db, world.hr, self._payload(world))

        stored = await _load_job(session_factory, job["id"])
        assert ensure_utc(stored.sla_deadline) - ensure_utc(stored.created_at) == timedelta(days=14)

    @pytest.mark.asyncio
    async def test_inactive_profession_is_rejected_without_write(self, db, session_factory, world):
        with pytest.raises(InvalidReference):
            await job_service.create_job(
                db, world.hr, self._payload(world, profession_id=world.typist.id)
            )

        assert await _job_count(session_factory) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["profession_id", "company_id"])
    async def test_missing_references_are_rejected(self, db, session_factory, world, field):
        with pytest.raises(InvalidReference):
            await job_service.create_job(db, world.hr, self._payload(world, **{field: None}))

        assert await _job_count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_unknown_company_is_rejected(self, db, world):
        with pytest.raises(InvalidReference):
            await job_service.create_job(db, world.admin, self._payload(world, company_id=9999))

    @pytest.mark.asyncio
    async def test_cost_center_must_belong_to_company(self, db, session_factory, world):
        with pytest.raises(InvalidReference):
            await job_service.create_job(
                db, world.hr, self._payload(world, cost_center_id=world.sales.id)
            )

        assert await _job_count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_accepts_own_cost_center(self, db, world):
        job = await job_service.create_job(
            db, world.hr, self._payload(world, cost_center_id=world.engineering.id)
        )
        assert job["cost_center_id"] == world.engineering.id

    @pytest.mark.asyncio
    async def test_client_must_belong_to_company(self, db, session_factory, world):
        with pytest.raises(InvalidReference):
            await job_service.create_job(
                db, world.hr, self._payload(world, client_id=world.globex_client.id)
            )

        assert await _job_count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_accepts_own_client(self, db, world):
        job = await job_service.create_job(
            db, world.hr, self._payload(world, client_id=world.acme_client.id)
        )
        assert job["client_id"] == world.acme_client.id

    @pytest.mark.asyncio
    async def test_inactive_client_is_rejected(self, db, session_factory, world):
        await company_service.delete_client(db, world.acme.id, world.acme_client.id)

        with pytest.raises(InvalidReference):
            await job_service.create_job(
                db, world.hr, self._payload(world, client_id=world.acme_client.id)
            )

        assert await _job_count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_requires_create_jobs(self, db, session_factory, world):
        with pytest.raises(Forbidden):
            await job_service.create_job(db, world.viewer, self._payload(world))

        with pytest.raises(Forbidden):
            await job_service.create_job(
                db, world.hr, self._payload(world, company_id=world.globex.id)
            )

        assert await _job_count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_invalid_initial_status(self, db, world):
        with pytest.raises(InvalidStatus):
            await job_service.create_job(db, world.hr, self._payload(world, status="archived"))


class TestListJobs:
    """Test job listing and visibility."""

    @pytest.mark.asyncio
    async def test_recruiter_does_not_see_pending_approval(self, db, world, make_job):
        await make_job("Open", JobStatus.ABERTO)
        await make_job("Approved", JobStatus.APROVADA)
        await make_job("Recruiting", JobStatus.EM_RECRUTAMENTO)

        as_recruiter = await job_service.list_jobs(db, world.recruiter)
        as_admin = await job_service.list_jobs(db, world.admin)

        assert [j["status"] for j in as_recruiter["jobs"]] == ["em_recrutamento"]
        assert as_recruiter["total"] == 1
        assert {j["status"] for j in as_admin["jobs"]} == {
            "aberto", "aprovada", "em_recrutamento",
        }

    @pytest.mark.asyncio
    async def test_recruiter_filter_composes_with_pagination(self, db, world, make_job):
        base = now() - timedelta(hours=10)
        for i in range(6):
            status = JobStatus.ABERTO if i % 2 else JobStatus.EM_RECRUTAMENTO
            await make_job(f"Job {i}", status, created_at=base + timedelta(hours=i))

        page = await job_service.list_jobs(db, world.recruiter, limit=2, offset=0)
        rest = await job_service.list_jobs(db, world.recruiter, limit=2, offset=2)

        assert page["total"] == 3
        assert len(page["jobs"]) == 2
        assert len(rest["jobs"]) == 1
        assert [j["title"] for j in page["jobs"] + rest["jobs"]] == ["Job 4", "Job 2", "Job 0"]

    @pytest.mark.asyncio
    async def test_scoped_to_companies_with_view_jobs(self, db, world, make_job):
        await make_job("Acme job")
        await make_job("Globex job", company=world.globex)

        as_viewer = await job_service.list_jobs(db, world.viewer)
        as_outsider = await job_service.list_jobs(db, world.outsider)

        assert [j["title"] for j in as_viewer["jobs"]] == ["Acme job"]
        assert as_outsider["jobs"] == []

    @pytest.mark.asyncio
    async def test_filters(self, db, world, make_job):
        await make_job("Welder", JobStatus.ACTIVE)
        await make_job("Electrician", JobStatus.PAUSED)
        await make_job("Welder helper", JobStatus.PAUSED, company=world.globex)

        by_search = await job_service.list_jobs(db, world.admin, search="weld")
        by_status = await job_service.list_jobs(db, world.admin, status="paused")
        by_company = await job_service.list_jobs(db, world.admin, company_id=world.globex.id)

        assert by_search["total"] == 2
        assert by_status["total"] == 2
        assert [j["title"] for j in by_company["jobs"]] == ["Welder helper"]

    @pytest.mark.asyncio
    async def test_invalid_status_filter(self, db, world):
        with pytest.raises(InvalidStatus):
            await job_service.list_jobs(db, world.admin, status="archived")


class TestGetJob:
    """Test reading a single job."""

    @pytest.mark.asyncio
    async def test_includes_sla_progress(self, db, world, make_job):
        job = await make_job(created_at=now() - timedelta(days=7, minutes=1))

        result = await job_service.get_job(db, world.viewer, job.id)

        assert result["sla"]["days_passed"] == 7
        assert result["sla"]["percentage"] == 50
        assert result["sla"]["is_overdue"] is False

    @pytest.mark.asyncio
    async def test_overdue_job(self, db, world, make_job):
        job = await make_job(created_at=now() - timedelta(days=15))

        result = await job_service.get_job(db, world.admin, job.id)

        assert result["sla"]["percentage"] == 100
        assert result["sla"]["is_overdue"] is True

    @pytest.mark.asyncio
    async def test_hidden_from_recruiter(self, db, world, make_job):
        job = await make_job(status=JobStatus.APROVADA)

        with pytest.raises(NotFound):
            await job_service.get_job(db, world.recruiter, job.id)

    @pytest.mark.asyncio
    async def test_requires_view_jobs(self, db, world, make_job):
        job = await make_job()

        with pytest.raises(Forbidden):
            await job_service.get_job(db, world.outsider, job.id)

    @pytest.mark.asyncio
    async def test_missing_job(self, db, world):
        with pytest.raises(NotFound):
            await job_service.get_job(db, world.admin, 9999)


class TestUpdateJob:
    """Test job updates."""

    @pytest.mark.asyncio
    async def test_company_cannot_change(self, db, session_factory, world, make_job):
        job = await make_job()

        result = await job_service.update_job(
            db, world.hr, job.id, {"title": "Senior Engineer", "company_id": world.globex.id}
        )

        stored = await _load_job(session_factory, job.id)
        assert result["title"] == "Senior Engineer"
        assert stored.company_id == world.acme.id

    @pytest.mark.asyncio
    async def test_sla_fields_cannot_change(self, db, session_factory, world, make_job):
        job = await make_job()
        original = await _load_job(session_factory, job.id)

        await job_service.update_job(db, world.hr, job.id, {
            "sla_deadline": now() + timedelta(days=90),
            "created_by": world.viewer.id,
        })

        stored = await _load_job(session_factory, job.id)
        assert stored.sla_deadline == original.sla_deadline
        assert stored.created_by == original.created_by

    @pytest.mark.asyncio
    async def test_requires_edit_jobs_in_stored_company(self, db, world, make_job):
        job = await make_job(company=world.globex)

        with pytest.raises(Forbidden):
            await job_service.update_job(
                db, world.hr, job.id, {"title": "x", "company_id": world.acme.id}
            )

    @pytest.mark.asyncio
    async def test_viewer_cannot_edit(self, db, world, make_job):
        job = await make_job()

        with pytest.raises(Forbidden):
            await job_service.update_job(db, world.viewer, job.id, {"title": "x"})

    @pytest.mark.asyncio
    async def test_new_profession_must_be_active(self, db, world, make_job):
        job = await make_job()

        with pytest.raises(InvalidReference):
            await job_service.update_job(db, world.hr, job.id, {"profession_id": world.typist.id})

    @pytest.mark.asyncio
    async def test_new_client_must_belong_to_company(self, db, session_factory, world, make_job):
        job = await make_job()

        with pytest.raises(InvalidReference):
            await job_service.update_job(
                db, world.hr, job.id, {"client_id": world.globex_client.id}
            )

        stored = await _load_job(session_factory, job.id)
        assert stored.client_id is None

    @pytest.mark.asyncio
    async def test_missing_job(self, db, world):
        with pytest.raises(NotFound):
            await job_service.update_job(db, world.hr, 9999, {"title": "x"})


class TestUpdateJobStatus:
    """Test status-only updates."""

    @pytest.mark.asyncio
    async def test_any_transition_is_allowed(self, db, world, make_job):
        job = await make_job(status=JobStatus.CANCELADA)

        result = await job_service.update_job_status(db, world.hr, job.id, "em_mobilizacao")

        assert result["status"] == "em_mobilizacao"

    @pytest.mark.asyncio
    async def test_unknown_status(self, db, world, make_job):
        job = await make_job()

        with pytest.raises(InvalidStatus):
            await job_service.update_job_status(db, world.hr, job.id, "archived")

    @pytest.mark.asyncio
    async def test_unknown_status_checked_before_permission(self, db, world, make_job):
        job = await make_job()

        with pytest.raises(InvalidStatus):
            await job_service.update_job_status(db, world.outsider, job.id, "archived")

    @pytest.mark.asyncio
    async def test_requires_edit_jobs(self, db, world, make_job):
        job = await make_job()

        with pytest.raises(Forbidden):
            await job_service.update_job_status(db, world.viewer, job.id, "active")


class TestDeleteJob:
    """Test job deletion."""

    @pytest.mark.asyncio
    async def test_hr_manager_can_delete(self, db, session_factory, world, make_job):
        job = await make_job()

        await job_service.delete_job(db, world.hr, job.id)

        assert await _job_count(session_factory) == 0

    @pytest.mark.asyncio
    async def test_recruiter_cannot_delete(self, db, session_factory, world, make_job):
        job = await make_job()

        with pytest.raises(Forbidden):
            await job_service.delete_job(db, world.recruiter, job.id)

        assert await _job_count(session_factory) == 1
