"""
Integration tests for the middleware stack of the real application.

Tests:
- Request IDs are propagated on success and on authentication failures
- Token failures are reported in the standard error envelope
- Tokens for missing or inactive users are rejected
- Validation errors carry field details
"""

from datetime import timedelta

import pytest

from core.security import create_access_token
from database.models.users import User


class TestRequestTracking:
    """Test request ID propagation through the stack."""

    @pytest.mark.asyncio
    async def test_generates_request_id(self, client):
        response = await client.get("/health")

        assert response.headers.get("x-request-id")

    @pytest.mark.asyncio
    async def test_echoes_request_id_on_401(self, client):
        response = await client.get("/api/v1/jobs", headers={"x-request-id": "req-42"})

        assert response.status_code == 401
        assert response.headers["x-request-id"] == "req-42"


class TestAuthenticationFailures:
    """Test how the full stack rejects bad credentials."""

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get("/api/v1/permissions/user-roles")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"

    @pytest.mark.asyncio
    async def test_expired_token(self, client, world):
        token = create_access_token(world.hr.id, expires_delta=timedelta(seconds=-5))

        response = await client.get(
            "/api/v1/jobs", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"

    @pytest.mark.asyncio
    async def test_garbage_token(self, client):
        response = await client.get(
            "/api/v1/jobs", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_user(self, client, world):
        token = create_access_token(9999)

        response = await client.get(
            "/api/v1/jobs", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"

    @pytest.mark.asyncio
    async def test_inactive_user(self, client, world, session_factory, auth_headers):
        async with session_factory() as session:
            user = await session.get(User, world.hr.id)
            user.is_active = False
            await session.commit()

        response = await client.get("/api/v1/jobs", headers=auth_headers(world.hr))

        assert response.status_code == 401


class TestValidationErrors:
    """Test validation error formatting."""

    @pytest.mark.asyncio
    async def test_field_details(self, client, world, auth_headers):
        response = await client.get(
            "/api/v1/jobs", params={"limit": 0}, headers=auth_headers(world.hr)
        )

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]
