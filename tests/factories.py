"""Test data builders for CSV uploads and SSE responses."""

from __future__ import annotations

import csv
import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from urllib.parse import urlencode

import anyio

from src.etl.extractors.csv import CSV_COLUMNS
from src.etl.types import RawRow

VALID_ROW: dict[str, str] = {
    "tmdb_id": "27205",
    "imdb_id": "tt1375666",
    "title": "Inception",
    "original_title": "Inception",
    "overview": "A thief who steals corporate secrets through dream-sharing technology.",
    "runtime": "148",
    "release_date": "2010-07-15",
    "genres": "['Action', 'Science Fiction', 'Adventure']",
    "countries_of_origin": "['GB', 'US']",
    "language": "en",
    "movie_status": "Released",
    "popularity": "83.952",
    "budget": "160000000",
    "revenue": "825532764",
    "rating_average": "8.4",
    "rating_count": "34495",
    "poster_url": "https://image.tmdb.org/t/p/original/oYuLEt3zVCKq57qu2F8dT7NIa6f.jpg",
    "rental_rate": "",
}


def make_row(**overrides: str) -> dict[str, str]:
    """Return a valid CSV row with some values replaced."""
    return {**VALID_ROW, **overrides}


def make_raw(index: int = 1, **overrides: str) -> RawRow:
    """Return a valid RawRow with some values replaced."""
    return RawRow(index=index, values=make_row(**overrides))


def movie_rows(count: int, start_tmdb_id: int = 1000) -> list[dict[str, str]]:
    """Return distinct valid rows."""
    return [
        make_row(
            tmdb_id=str(start_tmdb_id + i),
            imdb_id=f"tt{9000000 + start_tmdb_id + i}",
            title=f"Movie {i + 1}",
            original_title=f"Movie {i + 1}",
        )
        for i in range(count)
    ]


def write_csv(
    path: Path,
    rows: Iterable[Mapping[str, str]],
    columns: Iterable[str] = CSV_COLUMNS,
) -> Path:
    """Write rows to a CSV file with a header line.

    Args:
        path: Destination file.
        rows: Rows keyed by column name.
        columns: Header columns.

    Returns:
        The written path.
    """
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=list(columns), extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)
    return path


def csv_bytes(rows: Iterable[Mapping[str, str]], columns: Iterable[str] = CSV_COLUMNS) -> bytes:
    """Render rows as CSV file content."""
    lines = [",".join(columns)]
    for row in rows:
        lines.append(",".join(_quote(row.get(column, "")) for column in columns))
    return ("\n".join(lines) + "\n").encode("utf-8")


def _quote(value: str) -> str:
    if any(char in value for char in ',"\n'):
        return '"' + value.replace('"', '""') + '"'
    return value


def parse_sse_events(text: str) -> list[dict]:
    """Parse an SSE-formatted response body into a list of JSON dicts."""
    events: list[dict] = []
    for block in text.replace("\r\n", "\n").split("\n\n"):
        for line in block.strip().split("\n"):
            if line.startswith("data:"):
                raw = line[len("data:") :].strip()
                if not raw:
                    continue
                try:
                    events.append(json.loads(raw))
                except json.JSONDecodeError:
                    continue
    return events


def csv_upload(rows: Iterable[Mapping[str, str]], name: str = "movies.csv") -> dict:
    """Multipart ``files`` argument carrying rows as a CSV file."""
    return {"file": (name, csv_bytes(rows), "text/csv")}


def raw_upload(content: bytes, name: str = "movies.csv") -> dict:
    """Multipart ``files`` argument carrying raw file content."""
    return {"file": (name, content, "text/csv")}


async def stream_until_disconnect(
    app,  # noqa: ANN001
    path: str,
    params: Mapping[str, str],
    headers: Mapping[str, str],
    events_before_disconnect: int,
) -> list[dict]:
    """Call an SSE endpoint over raw ASGI and hang up mid-stream.

    The client disconnects once it has received the given number of
    data events.

    Returns:
        Events received before the app finished the response.
    """
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": urlencode(params).encode(),
        "headers": [(b"host", b"test")]
        + [(name.lower().encode(), value.encode()) for name, value in headers.items()],
        "client": ("127.0.0.1", 50000),
        "server": ("test", 80),
    }
    disconnected = anyio.Event()
    request_sent = False
    chunks: list[bytes] = []

    async def receive() -> dict:
        nonlocal request_sent
        if not request_sent:
            request_sent = True
            return {"type": "http.request", "body": b"", "more_body": False}
        if not disconnected.is_set():
            await disconnected.wait()
        return {"type": "http.disconnect"}

    async def send(message: dict) -> None:
        if message["type"] != "http.response.body":
            return
        body = message.get("body", b"")
        if b"data:" in body:
            chunks.append(body)
            if len(chunks) >= events_before_disconnect:
                disconnected.set()

    with anyio.fail_after(10):
        await app(scope, receive, send)
    return parse_sse_events(b"".join(chunks).decode("utf-8"))
