"""Unit tests for the python -m src command line."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

from src import __main__ as cli
from src.database.connection import Database
from src.database.repositories import MovieRepository, seed_reference_data
from tests.factories import movie_rows, write_csv


@pytest.fixture
def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Database]:
    db = Database(f"sqlite:///{tmp_path / 'cli.db'}")
    db.create_tables()
    with db.session() as session:
        seed_reference_data(session)
    monkeypatch.setattr("src.database.connection.get_database", lambda: db)
    yield db
    db.dispose()


@pytest.fixture
def movies_csv(tmp_path: Path) -> Path:
    rows = movie_rows(3)
    rows[1]["title"] = ""
    return write_csv(tmp_path / "movies.csv", rows)


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    monkeypatch.setattr(sys, "argv", ["reelfake", *args])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    return exc_info.value.code


def _stored(database: Database) -> int:
    with database.session() as session:
        return MovieRepository(session).count()


class TestImportCommand:
    @staticmethod
    def test_buffered_import(
        database: Database,
        movies_csv: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _run(monkeypatch, "import", str(movies_csv)) == 0

        assert _stored(database) == 2
        assert "2/3 movies imported" in capsys.readouterr().out
        assert movies_csv.exists()

    @staticmethod
    def test_stop_on_error_rolls_back(
        database: Database,
        movies_csv: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        assert _run(monkeypatch, "import", str(movies_csv), "--stop-on-error") == 1

        assert _stored(database) == 0

    @staticmethod
    def test_missing_file(database: Database, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        assert _run(monkeypatch, "import", str(tmp_path / "absent.csv")) == 1


class TestValidateCommand:
    @staticmethod
    def test_invalid_rows_fail(
        database: Database,
        movies_csv: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _run(monkeypatch, "validate", str(movies_csv)) == 1

        out = capsys.readouterr().out
        assert "Row 2: (title: ) The title is required" in out
        assert "2/3 rows valid" in out
        assert _stored(database) == 0

    @staticmethod
    def test_valid_file(database: Database, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write_csv(tmp_path / "valid.csv", movie_rows(2))

        assert _run(monkeypatch, "validate", str(path)) == 0


class TestMain:
    @staticmethod
    def test_no_command(monkeypatch: pytest.MonkeyPatch) -> None:
        assert _run(monkeypatch) == 1
