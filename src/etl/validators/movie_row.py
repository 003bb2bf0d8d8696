"""Row validator for bulk movie uploads.

Checks a row against the MovieRecord schema, then against the
catalog for duplicate TMDB and IMDb identifiers.
"""

from pydantic import ValidationError
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from src.database.repositories.catalog.movie import MovieRepository
from src.etl.extractors.csv.normalizer import MovieRowNormalizer
from src.etl.types import ParsedRow, RawRow, UploadError, UploadErrorKind, ValidationOutcome
from src.etl.utils.logger import setup_logger
from src.etl.validators.schemas import CUSTOM_ERROR_TYPES, INT_MAX, MovieRecord

# Schema field -> CSV column
FIELD_COLUMNS: dict[str, str] = {
    "genre_ids": "genres",
    "origin_country_ids": "countries_of_origin",
    "language_id": "language",
}

# Columns reported under their CSV name instead of the camelCase key
RAW_KEY_COLUMNS = frozenset({"genres", "countries_of_origin", "release_date"})

MESSAGE_OVERRIDES: dict[tuple[str, str], str] = {
    ("imdb_id", "string_pattern_mismatch"): "The imdb_id must be 'tt' followed by digits",
}


def format_reason(key: str, value: str | None, message: str) -> str:
    """Build a human-readable reason.

    Args:
        key: Field key shown to the client.
        value: Offending raw value.
        message: Violation message.

    Returns:
        Reason formatted as "(key: value) message".
    """
    return f"({key}: {value if value is not None else ''}) {message}"


class MovieRowValidator:
    """Validates uploaded movie rows.

    Collects every schema violation of a row at once, then checks the
    catalog for an existing TMDB id and, when given, IMDb id. The first
    duplicate found ends the duplicate checks for that row.
    """

    def __init__(self, session: Session, normalizer: MovieRowNormalizer | None = None) -> None:
        """Initialize validator.

        Args:
            session: Database session used for duplicate lookups.
            normalizer: Row normalizer (a new one when omitted).
        """
        self._repository = MovieRepository(session)
        self._normalizer = normalizer or MovieRowNormalizer()
        self._logger = setup_logger("etl.validators.movie_row")

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def validate(self, row_number: int, raw: RawRow) -> ValidationOutcome:
        """Validate a row and report reasons.

        Args:
            row_number: 1-based row number.
            raw: Row read from the CSV.

        Returns:
            Outcome with one reason per violation, never raises.
        """
        errors = self.check(raw, row_number=row_number)
        return ValidationOutcome(is_valid=not errors, reasons=[error.message for error in errors])

    def check(
        self,
        raw: RawRow,
        parsed: ParsedRow | None = None,
        row_number: int | None = None,
    ) -> list[UploadError]:
        """Validate a row and return structured errors.

        Args:
            raw: Row read from the CSV.
            parsed: Normalized row, computed when omitted.
            row_number: Row number for errors, raw.index when omitted.

        Returns:
            Upload errors, empty when the row is valid. A failing
            catalog lookup adds an UnhandledException error after the
            schema errors already found.
        """
        row_number = raw.index if row_number is None else row_number
        errors: list[UploadError] = []
        try:
            if parsed is None:
                parsed = self._normalizer.normalize(raw)
            errors.extend(self._check_schema(row_number, raw, parsed))
            duplicate = self._check_duplicates(row_number, raw, parsed)
            if duplicate is not None:
                errors.append(duplicate)
        except Exception as e:
            self._logger.exception(f"Unexpected error validating row {row_number}")
            errors.append(UploadError(UploadErrorKind.UNHANDLED_EXCEPTION, row_number, str(e)))
            return errors

        if errors:
            self._logger.debug(f"Row {row_number} invalid: {[error.message for error in errors]}")
        return errors

    # -------------------------------------------------------------------------
    # Schema Validation
    # -------------------------------------------------------------------------

    def _check_schema(self, row_number: int, raw: RawRow, parsed: ParsedRow) -> list[UploadError]:
        """Validate the parsed row against MovieRecord.

        Args:
            row_number: 1-based row number.
            raw: Row read from the CSV.
            parsed: Normalized row.

        Returns:
            One ValidationFailed error per field violation.
        """
        try:
            MovieRecord.model_validate(parsed.as_record(), context={"raw": raw})
        except ValidationError as e:
            return [self._to_upload_error(row_number, raw, detail) for detail in e.errors()]
        return []

    @staticmethod
    def _to_upload_error(row_number: int, raw: RawRow, detail: dict) -> UploadError:
        """Convert a pydantic error detail into an UploadError."""
        field_name = str(detail["loc"][0]) if detail["loc"] else ""
        column = FIELD_COLUMNS.get(field_name, field_name)
        key = column if column in RAW_KEY_COLUMNS else to_camel(column)
        value = raw.get(column)

        message = MESSAGE_OVERRIDES.get((field_name, detail["type"]))
        if message is None:
            if detail["type"] in CUSTOM_ERROR_TYPES:
                message = detail["msg"]
            else:
                # "Input should be ..." -> "The runtime should be ..."
                message = f"The {column} {detail['msg'].split(' ', 1)[-1]}"

        return UploadError(
            UploadErrorKind.VALIDATION_FAILED,
            row_number,
            format_reason(key, value, message),
            field={"key": column, "value": value},
        )

    # -------------------------------------------------------------------------
    # Duplicate Checks
    # -------------------------------------------------------------------------

    def _check_duplicates(self, row_number: int, raw: RawRow, parsed: ParsedRow) -> UploadError | None:
        """Check the catalog for existing identifiers.

        Args:
            row_number: 1-based row number.
            raw: Row read from the CSV.
            parsed: Normalized row.

        Returns:
            The first duplicate found, or None.
        """
        tmdb_id = parsed.tmdb_id
        if isinstance(tmdb_id, int) and 0 < tmdb_id <= INT_MAX and self._repository.exists_by_tmdb_id(tmdb_id):
            return UploadError(
                UploadErrorKind.DUPLICATE_TMDB_ID,
                row_number,
                f"Movie with the tmdb_id {tmdb_id} already exist",
                field={"key": "tmdb_id", "value": raw.get("tmdb_id")},
            )

        imdb_id = parsed.imdb_id
        if imdb_id is not None and self._repository.exists_by_imdb_id(imdb_id):
            return UploadError(
                UploadErrorKind.DUPLICATE_IMDB_ID,
                row_number,
                f"Movie with the imdb_id {imdb_id} already exist",
                field={"key": "imdb_id", "value": raw.get("imdb_id")},
            )

        return None
