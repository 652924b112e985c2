"""
Tests for authentication middleware and the current-user dependency.

Tests:
- Public endpoints bypass authentication
- Missing, malformed, expired and forged tokens are rejected with 401
- Verified payload is injected into the request scope
- get_current_user loads active users only
"""

import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, Mock

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from core.exceptions import Unauthenticated
from core.middleware.authentication import (
    PUBLIC_ENDPOINTS,
    AuthenticationMiddleware,
    get_current_user,
)
from core.security import create_access_token


@pytest.fixture
def app():
    """Create test FastAPI app."""
    app = FastAPI()

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    @app.get("/protected")
    async def protected_endpoint(request: Request):
        return {"user_id": request.scope["jwt_payload"]["user_id"]}

    app.add_middleware(AuthenticationMiddleware)
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


class TestAuthenticationMiddleware:
    """Test authentication middleware functionality."""

    def test_public_endpoint_no_auth(self, client):
        response = client.get("/health")

        assert response.status_code == 200

    def test_public_paths_never_401(self, client):
        for path in PUBLIC_ENDPOINTS:
            assert client.get(path).status_code != 401

    def test_protected_endpoint_requires_auth(self, client):
        response = client.get("/protected")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"

    def test_valid_token_injects_payload(self, client):
        token = create_access_token(user_id=7)

        response = client.get("/protected", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json() == {"user_id": 7}

    def test_non_bearer_scheme(self, client):
        token = create_access_token(user_id=7)

        response = client.get("/protected", headers={"Authorization": f"Token {token}"})

        assert response.status_code == 401

    def test_malformed_token(self, client):
        response = client.get("/protected", headers={"Authorization": "Bearer not.a.jwt"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"

    def test_expired_token(self, client):
        token = create_access_token(user_id=7, expires_delta=timedelta(minutes=-5))

        response = client.get("/protected", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"

    def test_token_signed_with_other_secret(self):
        app = FastAPI()

        @app.get("/protected")
        async def protected():
            return {}

        app.add_middleware(AuthenticationMiddleware, jwt_secret="another-secret-" * 3)
        token = create_access_token(user_id=7)

        response = TestClient(app).get(
            "/protected", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401


class TestGetCurrentUser:
    """Test loading the authenticated user."""

    def _request(self, payload=None):
        request = Mock()
        request.scope = {"jwt_payload": payload} if payload else {}
        return request

    def _db(self, user):
        db = AsyncMock()
        result = Mock()
        result.scalar_one_or_none.return_value = user
        db.execute.return_value = result
        return db

    @pytest.mark.asyncio
    async def test_returns_active_user(self):
        user = Mock(id=3, is_active=True)

        loaded = await get_current_user(self._request({"user_id": 3}), self._db(user))

        assert loaded is user

    @pytest.mark.asyncio
    async def test_missing_payload(self):
        with pytest.raises(Unauthenticated):
            await get_current_user(self._request(), self._db(None))

    @pytest.mark.asyncio
    async def test_unknown_user(self):
        with pytest.raises(Unauthenticated, match="not found"):
            await get_current_user(self._request({"user_id": 3}), self._db(None))

    @pytest.mark.asyncio
    async def test_inactive_user(self):
        user = Mock(id=3, is_active=False)

        with pytest.raises(Unauthenticated, match="inactive"):
            await get_current_user(self._request({"user_id": 3}), self._db(user))
