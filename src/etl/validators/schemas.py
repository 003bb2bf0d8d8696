"""Pydantic schema for uploaded movie records.

Validates a ParsedRow against the catalog rules: required fields,
numeric ranges, movie status values, reference ids and the IMDb
identifier format. Every violation is reported in one pass.
"""

import math
from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from src.etl.extractors.csv.normalizer import DATE_PATTERN
from src.etl.reference import VALID_COUNTRY_IDS, VALID_GENRE_IDS, VALID_LANGUAGE_IDS

# =============================================================================
# CONSTANTS
# =============================================================================

IMDB_ID_PATTERN = r"^tt\d+$"
"""Regex pattern for IMDb ids (tt followed by digits)."""

MovieStatus = Literal["Released", "Rumored", "Post Production", "In Production", "Planned", "Canceled"]

INT_MAX = 2**31 - 1
SMALLINT_MAX = 2**15 - 1
BIGINT_MAX = 2**63 - 1

MISSING_VALUE = "missing_value"
NOT_A_NUMBER = "not_a_number"
INVALID_REFERENCE = "invalid_reference"
INVALID_DATE = "invalid_date"

CUSTOM_ERROR_TYPES = frozenset({MISSING_VALUE, NOT_A_NUMBER, INVALID_REFERENCE, INVALID_DATE})


def _raw_text(info: ValidationInfo, column: str) -> str:
    """Return the raw CSV text of a column from the validation context."""
    raw = (info.context or {}).get("raw")
    if raw is None:
        return ""
    return (raw.get(column) or "").strip()


def _missing(column: str) -> PydanticCustomError:
    return PydanticCustomError(MISSING_VALUE, f"The {column} is required")


# =============================================================================
# MOVIE RECORD
# =============================================================================


class MovieRecord(BaseModel):
    """Catalog movie record built from an uploaded row.

    Attributes:
        tmdb_id: TMDB identifier, unique in the catalog.
        imdb_id: IMDb identifier (tt1234567), unique when present.
        title: Display title.
        original_title: Title in the original language.
        overview: Plot synopsis.
        runtime: Duration in minutes, 0 when unknown.
        release_date: Release date.
        genre_ids: Reference ids of the movie genres.
        origin_country_ids: Reference ids of the countries of origin.
        language_id: Reference id of the movie language.
        movie_status: Production status.
        popularity: TMDB popularity score.
        budget: Production budget in USD.
        revenue: Box office revenue in USD.
        rating_average: Average rating (0-10).
        rating_count: Number of ratings.
        poster_url: Poster image URL.
        rental_rate: Rental price, store default when absent.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    # Identifiers
    tmdb_id: int = Field(gt=0, le=INT_MAX)
    imdb_id: str | None = Field(default=None, max_length=60, pattern=IMDB_ID_PATTERN)

    # Basic info
    title: str = Field(min_length=1, max_length=255)
    original_title: str = Field(min_length=1, max_length=255)
    overview: str | None = None
    runtime: int = Field(default=0, ge=0, le=SMALLINT_MAX)
    release_date: date
    movie_status: MovieStatus

    # Relations
    genre_ids: list[int] = Field(min_length=1)
    origin_country_ids: list[int] = Field(min_length=1)
    language_id: int

    # Metrics
    popularity: float = Field(ge=0.0)
    rating_average: float = Field(ge=0.0, le=10.0)
    rating_count: int = Field(ge=0, le=INT_MAX)

    # Financial
    budget: int = Field(ge=0, le=BIGINT_MAX)
    revenue: int = Field(ge=0, le=BIGINT_MAX)
    rental_rate: float | None = Field(default=None, ge=0.0, le=99.99)

    # Media
    poster_url: str | None = Field(default=None, max_length=255)

    # -------------------------------------------------------------------------
    # Field Validators
    # -------------------------------------------------------------------------

    @field_validator("title", "original_title", "movie_status", mode="before")
    @classmethod
    def require_text(cls, v: Any, info: ValidationInfo) -> Any:
        """Reject blank required text."""
        if v is None:
            raise _missing(info.field_name)
        return v

    @field_validator("tmdb_id", "runtime", "budget", "revenue", "rating_count", mode="before")
    @classmethod
    def require_integer(cls, v: Any, info: ValidationInfo) -> Any:
        """Reject blank, non numeric or fractional integers."""
        if v is None:
            raise _missing(info.field_name)
        if isinstance(v, float):
            if math.isnan(v):
                raise PydanticCustomError(NOT_A_NUMBER, f"The {info.field_name} is not a number")
            raise PydanticCustomError(NOT_A_NUMBER, f"The {info.field_name} must be an integer")
        return v

    @field_validator("popularity", "rating_average", "rental_rate", mode="before")
    @classmethod
    def require_decimal(cls, v: Any, info: ValidationInfo) -> Any:
        """Reject blank required decimals and non finite numbers."""
        if v is None:
            if info.field_name == "rental_rate":
                return None
            raise _missing(info.field_name)
        if isinstance(v, float) and not math.isfinite(v):
            raise PydanticCustomError(NOT_A_NUMBER, f"The {info.field_name} is not a number")
        return v

    @field_validator("release_date", mode="before")
    @classmethod
    def require_release_date(cls, v: Any, info: ValidationInfo) -> Any:
        """Distinguish blank, malformed and impossible dates."""
        if v is not None:
            return v
        text = _raw_text(info, "release_date")
        if not text:
            raise PydanticCustomError(MISSING_VALUE, "The release_date is required (YYYY-MM-DD)")
        if not DATE_PATTERN.match(text):
            raise PydanticCustomError(INVALID_DATE, "The release_date must be in the format YYYY-MM-DD")
        raise PydanticCustomError(INVALID_DATE, "The release_date is not a valid calendar date (YYYY-MM-DD)")

    @field_validator("genre_ids", mode="before")
    @classmethod
    def check_genres(cls, v: Any, info: ValidationInfo) -> Any:
        """Require known genres."""
        return cls._check_references(v, info, "genres", "genres", VALID_GENRE_IDS)

    @field_validator("origin_country_ids", mode="before")
    @classmethod
    def check_countries(cls, v: Any, info: ValidationInfo) -> Any:
        """Require known countries of origin."""
        return cls._check_references(v, info, "countries_of_origin", "countries", VALID_COUNTRY_IDS)

    @field_validator("language_id", mode="before")
    @classmethod
    def check_language(cls, v: Any, info: ValidationInfo) -> Any:
        """Require a known language."""
        if v is None:
            if not _raw_text(info, "language"):
                raise _missing("language")
            raise PydanticCustomError(INVALID_REFERENCE, "The given language is invalid")
        if v not in VALID_LANGUAGE_IDS:
            raise PydanticCustomError(INVALID_REFERENCE, "The given language is invalid")
        return v

    @staticmethod
    def _check_references(
        v: Any,
        info: ValidationInfo,
        column: str,
        label: str,
        valid_ids: frozenset[int],
    ) -> Any:
        """Validate a list of resolved reference ids.

        Args:
            v: Resolved ids, None entries for unknown names.
            info: Validation info carrying the raw row.
            column: CSV column holding the names.
            label: Plural label used in messages.
            valid_ids: Ids present in the reference table.

        Returns:
            The ids unchanged.

        Raises:
            PydanticCustomError: If the list is empty or has unknown ids.
        """
        if not v:
            if not _raw_text(info, column):
                raise PydanticCustomError(MISSING_VALUE, f"The {label} are required")
            raise PydanticCustomError(INVALID_REFERENCE, f"The given {label} are invalid")
        if any(item is None or item not in valid_ids for item in v):
            raise PydanticCustomError(INVALID_REFERENCE, f"The given {label} are invalid")
        return v
