"""Shared fixtures and utilities for tests."""

import os

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-min-32-chars-long-for-security")
os.environ.setdefault("JWT_ALGORITHM", "HS256")
os.environ.setdefault("ACCESS_TOKEN_EXPIRE_MINUTES", "60")
os.environ.setdefault("JSON_LOGS", "false")

from datetime import datetime
from types import SimpleNamespace
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from api.main import app
from api.services.permissions import reseed_defaults
from core.security import create_access_token
from core.utils.datetime import now
from core.utils.sla import compute_sla_deadline
from database.engine import Base, get_db
from database.models.companies import Client, Company, CostCenter
from database.models.jobs import Job, JobStatus, Profession
from database.models.permissions import Role, UserCompanyRole
from database.models.users import User, UserRole


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Throwaway SQLite database for one test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def world(session_factory):
    """
    Two companies with users holding different roles in Acme.

    Each company has one cost center and one client.

    - admin: global admin, no company roles
    - owner: company ``admin`` role in Acme
    - hr: ``hr_manager`` in Acme
    - recruiter: global recruiter, ``recruiter`` in Acme
    - viewer: ``viewer`` in Acme
    - outsider: no roles anywhere
    """
    async with session_factory() as session:
        users = {
            "admin": User(email="admin@example.com", first_name="Ada", role=UserRole.ADMIN),
            "owner": User(email="owner@example.com", first_name="Olga"),
            "hr": User(email="hr@example.com", first_name="Hector"),
            "recruiter": User(
                email="recruiter@example.com", first_name="Rita", role=UserRole.RECRUITER
            ),
            "viewer": User(email="viewer@example.com", first_name="Vera"),
            "outsider": User(email="outsider@example.com", first_name="Otto"),
        }
        acme = Company(name="Acme", industry_type="construction")
        globex = Company(name="Globex", industry_type="energy")
        developer = Profession(name="Developer", category="tech")
        typist = Profession(name="Typist", category="admin", is_active=False)
        session.add_all([*users.values(), acme, globex, developer, typist])
        await session.flush()

        engineering = CostCenter(company_id=acme.id, name="Engineering", code="ENG")
        sales = CostCenter(company_id=globex.id, name="Sales", code="SAL")
        acme_client = Client(company_id=acme.id, name="Northwind", contact_person="Nina")
        globex_client = Client(company_id=globex.id, name="Contoso")
        session.add_all([engineering, sales, acme_client, globex_client])
        session.add_all([
            UserCompanyRole(user_id=users["owner"].id, company_id=acme.id, role=Role.ADMIN),
            UserCompanyRole(user_id=users["hr"].id, company_id=acme.id, role=Role.HR_MANAGER),
            UserCompanyRole(
                user_id=users["recruiter"].id, company_id=acme.id, role=Role.RECRUITER
            ),
            UserCompanyRole(user_id=users["viewer"].id, company_id=acme.id, role=Role.VIEWER),
        ])
        await session.commit()

        await reseed_defaults(session)

    return SimpleNamespace(
        **users,
        acme=acme,
        globex=globex,
        engineering=engineering,
        sales=sales,
        acme_client=acme_client,
        globex_client=globex_client,
        developer=developer,
        typist=typist,
    )


@pytest.fixture
def make_job(session_factory, world):
    """Insert a job directly, bypassing permission checks."""

    async def _make_job(
        title: str = "Site Engineer",
        status: JobStatus = JobStatus.DRAFT,
        company: Optional[Company] = None,
        created_at: Optional[datetime] = None,
    ) -> Job:
        created_at = created_at or now()
        async with session_factory() as session:
            job = Job(
                title=title,
                status=status,
                company_id=(company or world.acme).id,
                profession_id=world.developer.id,
                created_by=world.admin.id,
                created_at=created_at,
                updated_at=created_at,
                sla_deadline=compute_sla_deadline(created_at),
            )
            session.add(job)
            await session.commit()
            return job

    return _make_job


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a user."""

    def _auth_headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _auth_headers


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app, sharing the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
