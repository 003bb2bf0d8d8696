"""Streaming CSV row source for bulk movie uploads.

Reads an uploaded CSV file one data row per pull so the consumer
sets the pace: a slow validator or database never causes the file
to be buffered in memory.
"""

import csv
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import IO

from src.etl.types import RawRow
from src.etl.utils.logger import setup_logger

CSV_COLUMNS: tuple[str, ...] = (
    "tmdb_id",
    "imdb_id",
    "title",
    "original_title",
    "overview",
    "runtime",
    "release_date",
    "genres",
    "countries_of_origin",
    "language",
    "movie_status",
    "popularity",
    "budget",
    "revenue",
    "rating_average",
    "rating_count",
    "poster_url",
    "rental_rate",
)


class SourceError(Exception):
    """Raised when the CSV file is malformed or cannot be read."""


class CSVRowSource:
    """Ordered, single-pass iterator of RawRow over a CSV file.

    The file is opened on the first pull. Each pull reads exactly one
    data row and tags it with a 1-based index. Once the file is
    exhausted, aborted or has failed, every further pull reports
    exhaustion; build a new source to read the file again.

    The source never deletes the file it reads.
    """

    def __init__(self, path: Path | str, encoding: str = "utf-8-sig") -> None:
        """Initialize source.

        Args:
            path: CSV file to read.
            encoding: File encoding (BOM tolerant by default).
        """
        self._path = Path(path)
        self._encoding = encoding
        self._logger = setup_logger("etl.csv.source")
        self._lock = threading.Lock()
        self._handle: IO[str] | None = None
        self._reader: csv.DictReader | None = None
        self._index = 0
        self._finished = False
        self._aborted = False

    @property
    def path(self) -> Path:
        """File being read."""
        return self._path

    @property
    def rows_read(self) -> int:
        """Number of data rows produced so far."""
        return self._index

    @property
    def aborted(self) -> bool:
        """True once abort() has been called."""
        return self._aborted

    @property
    def finished(self) -> bool:
        """True once the sequence has ended for any reason."""
        return self._finished

    def __iter__(self) -> Iterator[RawRow]:
        return self

    def __next__(self) -> RawRow:
        with self._lock:
            if self._finished:
                raise StopIteration

            try:
                values = next(self._ensure_reader())
            except StopIteration:
                self._finish()
                self._logger.debug(f"Reached end of {self._path.name} after {self._index} rows")
                raise
            except SourceError:
                self._finish()
                raise
            except (csv.Error, OSError, UnicodeDecodeError) as e:
                self._finish()
                raise SourceError(f"Unable to read CSV row {self._index + 1}: {e}") from e

            self._index += 1
            if None in values:
                self._finish()
                raise SourceError(
                    f"Row {self._index} has more columns than the header ({len(self._reader.fieldnames)})"
                )

            return RawRow(index=self._index, values={k: v or "" for k, v in values.items()})

    def abort(self) -> None:
        """Stop the sequence; the next pull reports exhaustion.

        Safe to call repeatedly, after exhaustion and from another
        thread than the consumer.
        """
        with self._lock:
            if self._aborted:
                return
            self._aborted = True
            if not self._finished:
                self._logger.info(f"Aborted reading {self._path.name} after {self._index} rows")
            self._finish()

    def close(self) -> None:
        """Release the file handle without marking the source aborted."""
        with self._lock:
            self._finish()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _ensure_reader(self) -> csv.DictReader:
        """Open the file and read the header on first use.

        Returns:
            DictReader positioned on the first data row.

        Raises:
            SourceError: If the file cannot be opened or has no header.
        """
        if self._reader is not None:
            return self._reader

        try:
            self._handle = self._path.open("r", encoding=self._encoding, newline="")
        except OSError as e:
            raise SourceError(f"Unable to open CSV file {self._path.name}: {e}") from e

        reader = csv.DictReader(self._handle, strict=True)
        if not reader.fieldnames:
            raise SourceError("CSV file is empty, a header row is required")

        reader.fieldnames = [name.strip() for name in reader.fieldnames]
        self._reader = reader
        return reader

    def _finish(self) -> None:
        """Mark the sequence ended and close the file."""
        self._finished = True
        if self._handle is not None:
            self._handle.close()
            self._handle = None
