"""Shared fixtures for API integration tests.

Uses the module-level ``app`` from ``src.api.main`` with the database
dependencies pointed at the in-memory test catalog. The database
verification in the lifespan is patched out.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Generator
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session, sessionmaker

from src.api.database import get_db, get_session_factory
from src.api.services.upload_registry import get_upload_registry

# ---------------------------------------------------------------------------
# Auto-mark all tests in this directory as "integration"
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Auto-apply ``@pytest.mark.integration`` to every test collected here."""
    integration_marker = pytest.mark.integration
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(integration_marker)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_sse_app_status() -> Generator[None, None, None]:
    """Drop the exit event sse-starlette binds to the first event loop."""
    from sse_starlette.sse import AppStatus

    if hasattr(AppStatus, "should_exit_event"):
        AppStatus.should_exit_event = None
    yield


@pytest.fixture(autouse=True)
def clean_registry() -> Generator[None, None, None]:
    """Start and end every test without pending uploads."""
    get_upload_registry().clear()
    yield
    get_upload_registry().clear()


@pytest.fixture
async def client(session_factory: sessionmaker[Session]) -> AsyncGenerator[AsyncClient, None]:
    """Provide an ``httpx.AsyncClient`` wired to the real app.

    * ``_verify_database_connection`` is patched to skip DB checks.
    * ``get_db`` and ``get_session_factory`` use the test catalog.
    """
    from src.api.main import app

    def _get_test_db() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    with patch("src.api.main._verify_database_connection"):
        app.dependency_overrides[get_db] = _get_test_db
        app.dependency_overrides[get_session_factory] = lambda: session_factory
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_session_factory, None)


async def _login(client: AsyncClient, username: str, password: str) -> dict[str, str]:
    resp = await client.post(
        "/api/v1/auth/token",
        json={"username": username, "password": password},
    )
    assert resp.status_code == 200, f"Login failed: {resp.text}"
    token = resp.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def manager_headers(client: AsyncClient) -> dict[str, str]:
    """Authorization headers of a store manager."""
    return await _login(client, "manager", "managerpass123")


@pytest.fixture
async def clerk_headers(client: AsyncClient) -> dict[str, str]:
    """Authorization headers of a user without the store manager role."""
    return await _login(client, "clerk", "clerkpass123")
