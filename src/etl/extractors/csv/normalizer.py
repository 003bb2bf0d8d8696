"""Movie CSV row normalizer.

Transforms raw upload rows into typed ParsedRow values.
Never rejects a row: unparseable numbers become NaN and unknown
tag names resolve to None so the validator can report them.
"""

import json
import math
import re
from datetime import date

from src.etl.reference import COUNTRIES, GENRES, LANGUAGES, lookup_id
from src.etl.types import ParsedRow, RawRow
from src.etl.utils.logger import setup_logger

NAN = float("nan")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class MovieRowNormalizer:
    """Normalizes uploaded movie rows.

    Transforms RawRow values into ParsedRow ready for schema
    validation and insertion.
    """

    def __init__(self) -> None:
        """Initialize normalizer."""
        self._logger = setup_logger("etl.csv.normalizer")
        self._normalized_count: int = 0

    # -------------------------------------------------------------------------
    # Main Normalization
    # -------------------------------------------------------------------------

    def normalize(self, raw: RawRow) -> ParsedRow:
        """Normalize a single raw row.

        Args:
            raw: Row read from the uploaded CSV.

        Returns:
            Typed row; invalid values are left for the validator.
        """
        parsed = ParsedRow(
            tmdb_id=self._parse_int(raw.get("tmdb_id")),
            imdb_id=self._clean_string(raw.get("imdb_id")),
            title=self._clean_string(raw.get("title")),
            original_title=self._clean_string(raw.get("original_title")),
            overview=self._clean_string(raw.get("overview")),
            runtime=self._parse_runtime(raw.get("runtime")),
            release_date=self._parse_date(raw.get("release_date")),
            genre_ids=self._resolve_tags(GENRES, raw.get("genres")),
            origin_country_ids=self._resolve_tags(COUNTRIES, raw.get("countries_of_origin")),
            language_id=lookup_id(LANGUAGES, raw.get("language")),
            movie_status=self._clean_string(raw.get("movie_status")),
            popularity=self._parse_float(raw.get("popularity")),
            budget=self._parse_int(raw.get("budget")),
            revenue=self._parse_int(raw.get("revenue")),
            rating_average=self._parse_float(raw.get("rating_average")),
            rating_count=self._parse_int(raw.get("rating_count")),
            poster_url=self._clean_string(raw.get("poster_url")),
            rental_rate=self._parse_float(raw.get("rental_rate")),
        )
        self._normalized_count += 1
        return parsed

    # -------------------------------------------------------------------------
    # Tag Lookups
    # -------------------------------------------------------------------------

    def _resolve_tags(self, table: dict[str, int], value: str | None) -> list[int | None]:
        """Resolve a bracketed tag list to reference ids.

        Args:
            table: Reference table to look names up in.
            value: Raw text such as ['Action','Drama'].

        Returns:
            One id per name, None for unknown names. Empty when the
            text is blank or not a list.
        """
        names = self._parse_tag_list(value)
        if names is None:
            self._logger.debug(f"Unparseable tag list: {value!r}")
            return []
        return [lookup_id(table, name) for name in names]

    @staticmethod
    def _parse_tag_list(value: str | None) -> list[object] | None:
        """Decode the single-quoted list syntax used in the CSV.

        Args:
            value: Raw text.

        Returns:
            Decoded list items, [] when blank, None when undecodable.
        """
        if value is None or not value.strip():
            return []
        try:
            decoded = json.loads(value.strip().replace("'", '"'))
        except (ValueError, RecursionError):
            return None
        return decoded if isinstance(decoded, list) else None

    # -------------------------------------------------------------------------
    # Type Conversion Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _parse_int(value: str | None) -> int | float | None:
        """Convert to an arbitrary precision int.

        Args:
            value: Raw text.

        Returns:
            Int value, the float value when numeric but fractional,
            NaN when not a number, None when blank.
        """
        if value is None or not value.strip():
            return None
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return NAN
        if math.isfinite(number) and number.is_integer():
            return int(number)
        return number

    @staticmethod
    def _parse_float(value: str | None) -> float | None:
        """Convert to float.

        Args:
            value: Raw text.

        Returns:
            Float value, NaN when not a number, None when blank.
        """
        if value is None or not value.strip():
            return None
        try:
            return float(value.strip())
        except ValueError:
            return NAN

    def _parse_runtime(self, value: str | None) -> int | float:
        """Convert runtime, defaulting to 0 when blank."""
        parsed = self._parse_int(value)
        return 0 if parsed is None else parsed

    # -------------------------------------------------------------------------
    # String Cleaning Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _clean_string(value: str | None) -> str | None:
        """Clean string value.

        Args:
            value: String to clean.

        Returns:
            Stripped string or None when blank.
        """
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned if cleaned else None

    # -------------------------------------------------------------------------
    # Date Parsing
    # -------------------------------------------------------------------------

    @staticmethod
    def _parse_date(value: str | None) -> date | None:
        """Parse a YYYY-MM-DD date.

        Args:
            value: Raw date text.

        Returns:
            Calendar date or None when blank or invalid.
        """
        if value is None or not DATE_PATTERN.match(value.strip()):
            return None
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            return None

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    @property
    def normalized_count(self) -> int:
        """Number of rows normalized by this instance."""
        return self._normalized_count


def parse_row(raw: RawRow) -> ParsedRow:
    """Normalize one row with a fresh normalizer.

    Args:
        raw: Row read from the uploaded CSV.

    Returns:
        Typed row.
    """
    return MovieRowNormalizer().normalize(raw)
