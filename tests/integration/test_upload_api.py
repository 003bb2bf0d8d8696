"""Integration tests for the buffered and fail-fast upload endpoint.

Tests cover:
- Per-row outcomes of a buffered upload
- Rollback and error list of a fail-fast upload
- Malformed files
- Uploaded file cleanup
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from httpx import AsyncClient
from sqlalchemy.orm import Session, sessionmaker

from src.database.repositories import MovieRepository
from tests.factories import csv_upload, make_row, movie_rows, raw_upload

UPLOAD_URL = "/api/v1/movies/upload"


def _scenario_rows() -> list[dict[str, str]]:
    """Valid row, duplicate of the first, impossible release date."""
    return [
        make_row(tmdb_id="1", imdb_id="tt0000001"),
        make_row(tmdb_id="1", imdb_id="tt0000002"),
        make_row(tmdb_id="2", imdb_id="tt0000003", release_date="2020-13-40"),
    ]


def _stored_count(session_factory: sessionmaker[Session]) -> int:
    with session_factory() as session:
        return MovieRepository(session).count()


class TestBufferedUpload:
    """POST /api/v1/movies/upload"""

    @staticmethod
    async def test_scenario(
        client: AsyncClient,
        manager_headers: dict[str, str],
        session_factory: sessionmaker[Session],
    ) -> None:
        resp = await client.post(UPLOAD_URL, files=csv_upload(_scenario_rows()), headers=manager_headers)

        assert resp.status_code == 201
        data = resp.json()
        assert data["totalRows"] == 3
        assert [row["rowNumber"] for row in data["successRows"]] == [1]
        assert [row["rowNumber"] for row in data["failedRows"]] == [2, 3]
        assert data["failedRows"][0]["reasons"] == ["Movie with the tmdb_id 1 already exist"]
        assert "YYYY-MM-DD" in data["failedRows"][1]["reasons"][0]
        assert _stored_count(session_factory) == 1

    @staticmethod
    async def test_all_rows_valid(
        client: AsyncClient,
        manager_headers: dict[str, str],
        session_factory: sessionmaker[Session],
    ) -> None:
        resp = await client.post(UPLOAD_URL, files=csv_upload(movie_rows(5)), headers=manager_headers)

        assert resp.status_code == 201
        assert len(resp.json()["successRows"]) == 5
        assert resp.json()["failedRows"] == []
        assert _stored_count(session_factory) == 5

    @staticmethod
    async def test_header_only_file(client: AsyncClient, manager_headers: dict[str, str]) -> None:
        resp = await client.post(UPLOAD_URL, files=csv_upload([]), headers=manager_headers)

        assert resp.status_code == 201
        assert resp.json() == {"totalRows": 0, "successRows": [], "failedRows": []}

    @staticmethod
    async def test_malformed_file(
        client: AsyncClient,
        manager_headers: dict[str, str],
        upload_dir: Path,
    ) -> None:
        resp = await client.post(UPLOAD_URL, files=raw_upload(b""), headers=manager_headers)

        assert resp.status_code == 400
        assert "header" in resp.json()["detail"]
        assert list(upload_dir.iterdir()) == []

    @staticmethod
    async def test_uploaded_file_deleted(
        client: AsyncClient,
        manager_headers: dict[str, str],
        upload_dir: Path,
    ) -> None:
        await client.post(UPLOAD_URL, files=csv_upload(movie_rows(2)), headers=manager_headers)

        assert list(upload_dir.iterdir()) == []

    @staticmethod
    async def test_unexpected_error(client: AsyncClient, manager_headers: dict[str, str]) -> None:
        with patch("src.etl.pipeline.ingestion.MovieLoader.create", side_effect=RuntimeError("disk full")):
            resp = await client.post(UPLOAD_URL, files=csv_upload(movie_rows(1)), headers=manager_headers)

        assert resp.status_code == 500
        assert resp.json() == {"message": "disk full"}

    @staticmethod
    async def test_missing_file(client: AsyncClient, manager_headers: dict[str, str]) -> None:
        resp = await client.post(UPLOAD_URL, headers=manager_headers)

        assert resp.status_code == 422


class TestFailFastUpload:
    """POST /api/v1/movies/upload?stop_on_error=true"""

    @staticmethod
    async def test_rolls_back_on_first_failure(
        client: AsyncClient,
        manager_headers: dict[str, str],
        session_factory: sessionmaker[Session],
    ) -> None:
        resp = await client.post(
            UPLOAD_URL,
            params={"stop_on_error": "true"},
            files=csv_upload(_scenario_rows()),
            headers=manager_headers,
        )

        assert resp.status_code == 400
        errors = resp.json()
        assert errors == [
            {
                "rowNumber": 2,
                "kind": "DuplicateTmdbId",
                "message": "Movie with the tmdb_id 1 already exist",
                "field": {"key": "tmdb_id", "value": "1"},
            }
        ]
        assert _stored_count(session_factory) == 0

    @staticmethod
    async def test_commits_when_every_row_passes(
        client: AsyncClient,
        manager_headers: dict[str, str],
        session_factory: sessionmaker[Session],
    ) -> None:
        resp = await client.post(
            UPLOAD_URL,
            params={"stop_on_error": "true"},
            files=csv_upload(movie_rows(3)),
            headers=manager_headers,
        )

        assert resp.status_code == 201
        assert [row["rowNumber"] for row in resp.json()["successRows"]] == [1, 2, 3]
        assert _stored_count(session_factory) == 3
