"""ETL data types package.

Exports the row, outcome and summary structures used throughout
the bulk upload pipeline.

Usage:
    from src.etl.types import RawRow, ParsedRow, UploadError
"""

from src.etl.types.upload import (
    ParsedRow,
    RawRow,
    RowFailure,
    RowOutcome,
    RowSuccess,
    RowValidation,
    RunSummary,
    UploadError,
    UploadErrorKind,
    ValidationOutcome,
    ValidationSummary,
)

__all__ = [
    # Rows
    "RawRow",
    "ParsedRow",
    # Errors
    "UploadError",
    "UploadErrorKind",
    # Outcomes
    "ValidationOutcome",
    "RowSuccess",
    "RowFailure",
    "RowOutcome",
    "RowValidation",
    # Summaries
    "RunSummary",
    "ValidationSummary",
]
