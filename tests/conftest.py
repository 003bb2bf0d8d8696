"""Shared pytest fixtures for Reelfake tests.

Configures a test environment before settings are loaded and
provides an in-memory SQLite catalog seeded with reference data.
"""

from __future__ import annotations

import os
from collections.abc import Generator, Iterable, Mapping
from pathlib import Path

# Settings are instantiated on import of src.settings
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET_KEY", "test_jwt_secret_key_12345678901234567890")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_DEMO_USERS", "manager:managerpass123,clerk:clerkpass123")
os.environ.setdefault("AUTH_STORE_MANAGERS", "manager")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.database.connection import build_engine  # noqa: E402
from src.database.models import Base  # noqa: E402
from src.database.repositories.catalog import seed_reference_data  # noqa: E402
from src.etl.extractors.csv import CSV_COLUMNS  # noqa: E402
from src.settings import settings  # noqa: E402
from tests.factories import write_csv  # noqa: E402

# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine with the catalog schema and reference data.

    StaticPool keeps a single connection so every session sees the
    same in-memory database.
    """
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        seed_reference_data(session)
        session.commit()
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    """Session factory bound to the test engine."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Session on the test catalog, closed after the test."""
    session = session_factory()
    yield session
    session.close()


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def upload_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect uploaded files to a temporary directory."""
    directory = tmp_path / "uploads"
    directory.mkdir()
    monkeypatch.setattr(settings.upload, "upload_dir", str(directory))
    return directory


@pytest.fixture
def csv_file(upload_dir: Path):
    """Factory writing CSV rows into the uploads directory."""
    written: list[Path] = []

    def _make(rows: Iterable[Mapping[str, str]], columns: Iterable[str] = CSV_COLUMNS) -> Path:
        path = upload_dir / f"upload_{len(written) + 1}.csv"
        written.append(path)
        return write_csv(path, rows, columns)

    return _make
