"""Ingestion run - one bulk movie upload from CSV file to catalog.

Each upload gets its own IngestionRun owning the CSV source, the
counters and the uploaded file. Rows are processed strictly in file
order, one at a time:

    pull row -> normalize -> validate -> insert (savepoint) -> outcome

Operating modes:
    - process: buffered import, commit after every inserted row
    - process_atomic: single transaction, first failing row rolls back
    - iter_outcomes: per-row outcomes for progress streaming
    - validate_only / iter_validation: validation without inserts
"""

import re
import time
from collections.abc import Callable, Iterator
from pathlib import Path

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.etl.extractors.csv import CSVRowSource, MovieRowNormalizer
from src.etl.loaders import BaseLoader, MovieLoader
from src.etl.types import (
    ParsedRow,
    RawRow,
    RowFailure,
    RowOutcome,
    RowSuccess,
    RowValidation,
    RunSummary,
    UploadError,
    UploadErrorKind,
    ValidationSummary,
)
from src.etl.utils.logger import setup_logger
from src.etl.validators import MovieRowValidator
from src.settings import settings

logger = setup_logger("etl.pipeline.ingestion")

SuccessCallback = Callable[[int, int], None]
ErrorCallback = Callable[[int, list[UploadError]], None]

_UNIQUE_KEY_PATTERNS = (
    re.compile(r"UNIQUE constraint failed: \w+\.(\w+)"),
    re.compile(r"duplicate key value violates unique constraint.*?Key \((\w+)\)", re.DOTALL),
)


class AtomicUploadAborted(Exception):
    """Raised when a fail-fast upload stops on its first failing row.

    Attributes:
        errors: Upload errors of the failing row.
    """

    def __init__(self, errors: list[UploadError]) -> None:
        self.errors = errors
        row = errors[0].row_number if errors else -1
        super().__init__(f"Upload rolled back at row {row}")


def check_event_delay(delay_ms: int) -> int:
    """Validate the validate-only per-row delay.

    Args:
        delay_ms: Delay between rows in milliseconds.

    Returns:
        The delay unchanged.

    Raises:
        ValueError: If the delay is outside 0..max_event_delay_ms.
    """
    limit = settings.upload.max_event_delay_ms
    if not 0 <= delay_ms <= limit:
        raise ValueError(f"delay_event_ms must be between 0 and {limit}")
    return delay_ms


class IngestionRun:
    """One bulk upload of a CSV file into the catalog.

    A run can be started once. Whatever the mode, the uploaded file
    is deleted when the run ends, is aborted or fails.

    Attributes:
        file_path: Uploaded CSV file.
        summary: Outcomes recorded so far.
    """

    def __init__(
        self,
        file_path: Path | str,
        session: Session,
        validator: MovieRowValidator | None = None,
        loader: BaseLoader[ParsedRow] | None = None,
    ) -> None:
        """Initialize run.

        Args:
            file_path: Uploaded CSV file, owned by the run.
            session: Database session used for lookups and inserts.
            validator: Row validator (built on session when omitted).
            loader: Row loader (MovieLoader when omitted).
        """
        self.file_path = Path(file_path)
        self._session = session
        self._source = CSVRowSource(self.file_path)
        self._normalizer = MovieRowNormalizer()
        self._validator = validator or MovieRowValidator(session, self._normalizer)
        self._loader = loader or MovieLoader(session)
        self._started = False
        self.summary = RunSummary()

    @property
    def aborted(self) -> bool:
        """True once abort() has been called."""
        return self._source.aborted

    @property
    def rows_read(self) -> int:
        """Number of rows pulled from the file."""
        return self._source.rows_read

    def abort(self) -> None:
        """Stop the run at the next row boundary.

        Safe to call repeatedly, after the run ended and from another
        thread than the one driving the run.
        """
        self._source.abort()

    def delete_file(self) -> None:
        """Delete the uploaded file; no-op when already gone."""
        self.file_path.unlink(missing_ok=True)

    # -------------------------------------------------------------------------
    # Import Modes
    # -------------------------------------------------------------------------

    def process(
        self,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> RunSummary:
        """Import every row, committing each inserted movie.

        Args:
            on_success: Called with (row_number, id) per inserted row.
            on_error: Called with (row_number, errors) per failed row.

        Returns:
            Summary of the run.

        Raises:
            SourceError: If the CSV is malformed or unreadable.
        """
        for outcome in self.iter_outcomes():
            if isinstance(outcome, RowSuccess):
                if on_success:
                    on_success(outcome.row_number, outcome.id)
            elif on_error:
                on_error(outcome.row_number, list(outcome.errors))
        return self.summary

    def process_atomic(self) -> RunSummary:
        """Import every row in one transaction, stopping at the first failure.

        Returns:
            Summary of the run, all rows inserted.

        Raises:
            AtomicUploadAborted: If a row failed; nothing is committed.
            SourceError: If the CSV is malformed or unreadable.
        """
        for _ in self.iter_outcomes(stop_on_error=True):
            pass
        return self.summary

    def iter_outcomes(self, stop_on_error: bool = False) -> Iterator[RowOutcome]:
        """Import rows, yielding one outcome per row in file order.

        With stop_on_error, the failing row is yielded and the next
        pull raises AtomicUploadAborted after the rollback.

        Args:
            stop_on_error: Use one transaction and stop at the first failure.

        Returns:
            Iterator of RowSuccess / RowFailure.
        """
        self._begin("import")
        return self._run_import(stop_on_error)

    def _run_import(self, stop_on_error: bool) -> Iterator[RowOutcome]:
        """Drive the import loop (see iter_outcomes)."""
        completed = False
        try:
            for raw in self._source:
                outcome = self._process_row(raw)
                self.summary.record(outcome)

                if isinstance(outcome, RowFailure) and stop_on_error:
                    self._session.rollback()
                    logger.warning(f"Row {outcome.row_number} failed, upload rolled back: {outcome.reasons}")
                    completed = True
                    yield outcome
                    raise AtomicUploadAborted(list(outcome.errors))

                if not stop_on_error:
                    self._session.commit()
                yield outcome

            if stop_on_error and self._source.aborted:
                self._session.rollback()
            else:
                self._session.commit()
            completed = True
            self._log_summary()
        finally:
            self._end(completed)

    # -------------------------------------------------------------------------
    # Validate-only Mode
    # -------------------------------------------------------------------------

    def validate_only(self, delay_ms: int = 0) -> ValidationSummary:
        """Validate every row without inserting anything.

        Args:
            delay_ms: Pause before each row, 0..max_event_delay_ms.

        Returns:
            Validation counters and invalid rows.

        Raises:
            ValueError: If delay_ms is out of range (no row is read).
            SourceError: If the CSV is malformed or unreadable.
        """
        summary = ValidationSummary()
        for result in self.iter_validation(delay_ms):
            summary.record(result)
        return summary

    def iter_validation(self, delay_ms: int = 0) -> Iterator[RowValidation]:
        """Validate rows, yielding one result per row in file order.

        Args:
            delay_ms: Pause before each row, 0..max_event_delay_ms.

        Returns:
            Iterator of RowValidation.

        Raises:
            ValueError: If delay_ms is out of range (no row is read).
        """
        check_event_delay(delay_ms)
        self._begin("validation")
        return self._run_validation(delay_ms / 1000)

    def _run_validation(self, delay_seconds: float) -> Iterator[RowValidation]:
        """Drive the validation loop (see iter_validation)."""
        try:
            for raw in self._source:
                if delay_seconds:
                    time.sleep(delay_seconds)
                outcome = self._validator.validate(raw.index, raw)
                yield RowValidation(raw.index, outcome.is_valid, outcome.reasons)
        finally:
            self._end(completed=False)

    # -------------------------------------------------------------------------
    # Row Processing
    # -------------------------------------------------------------------------

    def _process_row(self, raw: RawRow) -> RowOutcome:
        """Validate and insert one row inside a savepoint.

        Args:
            raw: Row read from the CSV.

        Returns:
            RowSuccess, or RowFailure for validation, duplicate and
            unique key failures. Other database errors propagate.
        """
        parsed = self._normalizer.normalize(raw)
        errors = self._validator.check(raw, parsed)
        if errors:
            return RowFailure(raw.index, tuple(errors))

        savepoint = self._session.begin_nested()
        try:
            created = self._loader.create(parsed)
        except IntegrityError as e:
            savepoint.rollback()
            return RowFailure(raw.index, (self._unique_violation(raw, e),))
        except Exception:
            savepoint.rollback()
            raise

        if created.tmdb_id != parsed.tmdb_id:
            savepoint.rollback()
            logger.error(f"Row {raw.index}: stored tmdb_id {created.tmdb_id} != {parsed.tmdb_id}")
            error = UploadError(UploadErrorKind.DATABASE_ERROR, -1, f"Error adding data for row {raw.index}")
            return RowFailure(raw.index, (error,))

        savepoint.commit()
        return RowSuccess(raw.index, created.id)

    @staticmethod
    def _unique_violation(raw: RawRow, error: IntegrityError) -> UploadError:
        """Convert a unique constraint failure into an UploadError.

        Args:
            raw: Row being inserted.
            error: Error raised by the database.

        Returns:
            UniqueKeyViolation error naming the column.

        Raises:
            IntegrityError: If the error is not a unique violation.
        """
        detail = str(error.orig)
        for pattern in _UNIQUE_KEY_PATTERNS:
            match = pattern.search(detail)
            if match:
                key = match.group(1)
                return UploadError(
                    UploadErrorKind.UNIQUE_KEY_VIOLATION,
                    raw.index,
                    f"({key}) {key} must be unique",
                    field={"key": key, "value": raw.get(key)},
                )
        raise error

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def _begin(self, mode: str) -> None:
        """Mark the run started.

        Raises:
            RuntimeError: If the run was already started.
        """
        if self._started:
            raise RuntimeError("An ingestion run can only be started once")
        self._started = True
        logger.info(f"Starting {mode} of {self.file_path.name}")

    def _end(self, completed: bool) -> None:
        """Release the source, undo pending writes and delete the file."""
        if not completed:
            self._session.rollback()
        self._source.close()
        self.delete_file()
        if self._source.aborted:
            logger.info(f"Run on {self.file_path.name} aborted after {self.rows_read} rows")

    def _log_summary(self) -> None:
        """Log final import statistics."""
        logger.info(
            f"Import of {self.file_path.name} complete: "
            f"total={self.summary.total_rows}, "
            f"success={len(self.summary.success_rows)}, "
            f"failed={len(self.summary.failed_rows)}"
        )
