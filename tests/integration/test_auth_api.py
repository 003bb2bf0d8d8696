"""Integration tests for authentication and health endpoints.

Tests cover:
- Token issuance with role claim
- Invalid credentials
- Role enforcement on upload endpoints
- Health status with and without database
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from httpx import AsyncClient
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from tests.factories import csv_upload, movie_rows

# ============================================================================
# Token
# ============================================================================


class TestAuthToken:
    """POST /api/v1/auth/token"""

    @staticmethod
    async def test_store_manager_role(client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/auth/token",
            json={"username": "manager", "password": "managerpass123"},
        )

        assert resp.status_code == 200
        data = resp.json()
        assert data["token_type"] == "bearer"
        assert data["role"] == "STORE_MANAGER"
        assert data["expires_in"] > 0

    @staticmethod
    async def test_user_role(client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/auth/token",
            json={"username": "clerk", "password": "clerkpass123"},
        )

        assert resp.status_code == 200
        assert resp.json()["role"] == "USER"

    @staticmethod
    async def test_wrong_password(client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/auth/token",
            json={"username": "manager", "password": "wrongpass123"},
        )

        assert resp.status_code == 401

    @staticmethod
    async def test_short_password_rejected(client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/auth/token",
            json={"username": "manager", "password": "short"},
        )

        assert resp.status_code == 422


# ============================================================================
# Role enforcement
# ============================================================================


class TestUploadAuthorization:
    """Upload endpoints require a store manager token."""

    @staticmethod
    async def test_missing_token(client: AsyncClient) -> None:
        resp = await client.post("/api/v1/movies/upload", files=csv_upload(movie_rows(1)))

        assert resp.status_code in (401, 403)

    @staticmethod
    async def test_invalid_token(client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/movies/upload",
            files=csv_upload(movie_rows(1)),
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert resp.status_code == 401

    @staticmethod
    async def test_user_role_forbidden(client: AsyncClient, clerk_headers: dict[str, str]) -> None:
        resp = await client.post(
            "/api/v1/movies/upload/validate",
            files=csv_upload(movie_rows(1)),
            headers=clerk_headers,
        )

        assert resp.status_code == 403
        assert resp.json()["detail"] == "Store manager role required"

    @staticmethod
    async def test_user_cannot_track(client: AsyncClient, clerk_headers: dict[str, str]) -> None:
        resp = await client.get(
            "/api/v1/movies/upload/track",
            params={"upload_id": "anything"},
            headers=clerk_headers,
        )

        assert resp.status_code == 403


# ============================================================================
# Health
# ============================================================================


class TestHealth:
    """GET /api/v1/health"""

    @staticmethod
    async def test_healthy(client: AsyncClient, engine: Engine) -> None:
        with patch("src.api.routers.health.get_engine", return_value=engine):
            resp = await client.get("/api/v1/health")

        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["components"]["database"]["connected"] is True

    @staticmethod
    async def test_degraded(client: AsyncClient) -> None:
        broken = MagicMock()
        broken.connect.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))

        with patch("src.api.routers.health.get_engine", return_value=broken):
            resp = await client.get("/api/v1/health")

        assert resp.status_code == 200
        assert resp.json()["status"] == "degraded"
        assert resp.json()["components"]["database"]["connected"] is False
