"""Bulk upload data types.

Row, outcome and summary structures exchanged between the CSV
source, the row validator and the ingestion run.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any


class UploadErrorKind(str, Enum):
    """Category of a row-level upload failure."""

    DUPLICATE_TMDB_ID = "DuplicateTmdbId"
    DUPLICATE_IMDB_ID = "DuplicateImdbId"
    VALIDATION_FAILED = "ValidationFailed"
    UNIQUE_KEY_VIOLATION = "UniqueKeyViolation"
    DATABASE_ERROR = "DatabaseError"
    UNHANDLED_EXCEPTION = "UnhandledException"


class UploadError(Exception):
    """Structured failure attached to an uploaded row.

    Attributes:
        kind: Failure category.
        row_number: 1-based CSV row, -1 when not row-scoped.
        message: Human-readable reason.
        field: Optional offending column as {"key", "value"}.
    """

    def __init__(
        self,
        kind: UploadErrorKind,
        row_number: int,
        message: str,
        field: dict[str, str | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.row_number = row_number
        self.message = message
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses.

        Returns:
            Dict with rowNumber, kind, message and field when set.
        """
        data: dict[str, Any] = {
            "rowNumber": self.row_number,
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.field is not None:
            data["field"] = self.field
        return data

    def __repr__(self) -> str:
        return f"UploadError({self.kind.value}, row={self.row_number}, {self.message!r})"


# =============================================================================
# ROWS
# =============================================================================


@dataclass(frozen=True)
class RawRow:
    """One CSV data row as read from the file.

    Attributes:
        index: 1-based position among data rows.
        values: Column name -> raw string value.
    """

    index: int
    values: Mapping[str, str]

    def get(self, column: str) -> str | None:
        """Return the raw value of a column, None when absent."""
        return self.values.get(column)


@dataclass
class ParsedRow:
    """Typed projection of a RawRow.

    Numeric fields that fail coercion hold NaN, blank ones hold None
    and unknown tag names resolve to None; the validator reports them.
    """

    tmdb_id: int | float | None
    imdb_id: str | None
    title: str | None
    original_title: str | None
    overview: str | None
    runtime: int | float
    release_date: date | None
    genre_ids: list[int | None]
    origin_country_ids: list[int | None]
    language_id: int | None
    movie_status: str | None
    popularity: float | None
    budget: int | float | None
    revenue: int | float | None
    rating_average: float | None
    rating_count: int | float | None
    poster_url: str | None
    rental_rate: float | None

    def as_record(self) -> dict[str, Any]:
        """Return the fields as a plain dict for schema validation."""
        return {
            "tmdb_id": self.tmdb_id,
            "imdb_id": self.imdb_id,
            "title": self.title,
            "original_title": self.original_title,
            "overview": self.overview,
            "runtime": self.runtime,
            "release_date": self.release_date,
            "genre_ids": self.genre_ids,
            "origin_country_ids": self.origin_country_ids,
            "language_id": self.language_id,
            "movie_status": self.movie_status,
            "popularity": self.popularity,
            "budget": self.budget,
            "revenue": self.revenue,
            "rating_average": self.rating_average,
            "rating_count": self.rating_count,
            "poster_url": self.poster_url,
            "rental_rate": self.rental_rate,
        }


# =============================================================================
# OUTCOMES
# =============================================================================


@dataclass
class ValidationOutcome:
    """Result of validating one row."""

    is_valid: bool
    reasons: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RowSuccess:
    """Row persisted under the generated catalog id."""

    row_number: int
    id: int

    def to_dict(self) -> dict[str, int]:
        """Serialize as {rowNumber, id}."""
        return {"rowNumber": self.row_number, "id": self.id}


@dataclass(frozen=True)
class RowFailure:
    """Row rejected with one or more upload errors."""

    row_number: int
    errors: tuple[UploadError, ...]

    @property
    def reasons(self) -> list[str]:
        """Messages of the attached errors, in order."""
        return [error.message for error in self.errors]

    def to_dict(self) -> dict[str, Any]:
        """Serialize as {rowNumber, reasons}."""
        return {"rowNumber": self.row_number, "reasons": self.reasons}


RowOutcome = RowSuccess | RowFailure


@dataclass(frozen=True)
class RowValidation:
    """Validate-only result for one row."""

    row_number: int
    is_valid: bool
    reasons: list[str] = field(default_factory=list)


# =============================================================================
# SUMMARIES
# =============================================================================


@dataclass
class RunSummary:
    """Aggregate of an ingestion run.

    Attributes:
        success_rows: Persisted rows, in file order.
        failed_rows: Rejected rows, in file order.
    """

    success_rows: list[RowSuccess] = field(default_factory=list)
    failed_rows: list[RowFailure] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        """Number of rows processed."""
        return len(self.success_rows) + len(self.failed_rows)

    def record(self, outcome: RowOutcome) -> None:
        """Append an outcome to the matching list."""
        if isinstance(outcome, RowSuccess):
            self.success_rows.append(outcome)
        else:
            self.failed_rows.append(outcome)

    def to_dict(self) -> dict[str, Any]:
        """Serialize as {totalRows, successRows, failedRows}."""
        return {
            "totalRows": self.total_rows,
            "successRows": [row.to_dict() for row in self.success_rows],
            "failedRows": [row.to_dict() for row in self.failed_rows],
        }


@dataclass
class ValidationSummary:
    """Aggregate of a validate-only run."""

    valid_rows_count: int = 0
    invalid_rows: list[RowValidation] = field(default_factory=list)

    @property
    def invalid_rows_count(self) -> int:
        """Number of rows that failed validation."""
        return len(self.invalid_rows)

    @property
    def processed_rows_count(self) -> int:
        """Number of rows validated."""
        return self.valid_rows_count + self.invalid_rows_count

    @property
    def total_rows(self) -> int:
        """Same as processed_rows_count once the run is drained."""
        return self.processed_rows_count

    def record(self, result: RowValidation) -> None:
        """Count a validated row."""
        if result.is_valid:
            self.valid_rows_count += 1
        else:
            self.invalid_rows.append(result)

    def counts(self) -> dict[str, int]:
        """Serialize the counters in camelCase."""
        return {
            "totalRows": self.total_rows,
            "processedRowsCount": self.processed_rows_count,
            "validRowsCount": self.valid_rows_count,
            "invalidRowsCount": self.invalid_rows_count,
        }
