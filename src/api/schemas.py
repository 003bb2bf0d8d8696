"""Request and response models of the HTTP API.

Catalog, authentication and health payloads use snake_case keys.
Bulk upload payloads are serialized in camelCase.
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from math import ceil

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DatabaseComponentHealth(BaseModel):
    connected: bool = False


class HealthComponents(BaseModel):
    database: DatabaseComponentHealth = Field(default_factory=DatabaseComponentHealth)


class HealthResponse(BaseModel):
    """Body of GET /health; status is 'healthy' or 'degraded'."""

    status: str = Field(examples=["healthy", "degraded"])
    version: str
    components: HealthComponents = Field(default_factory=HealthComponents)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class TokenRequest(BaseModel):
    """Demo-account credentials."""

    username: str = Field(min_length=3, max_length=50, examples=["manager"])
    password: str = Field(min_length=8, max_length=100)


class TokenResponse(BaseModel):
    """Issued bearer token and the role it carries."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Seconds until the token expires")
    role: str = Field(examples=["STORE_MANAGER", "USER"])


class PaginationParams(BaseModel):
    """1-based page number and page size."""

    page: int = Field(default=1, ge=1, le=1000)
    size: int = Field(default=20, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


class PaginatedMeta(BaseModel):
    """Position of a page within the full result set."""

    page: int
    size: int
    total: int
    pages: int

    @classmethod
    def from_params(cls, params: PaginationParams, total: int) -> "PaginatedMeta":
        return cls(page=params.page, size=params.size, total=total, pages=ceil(total / params.size))


# =============================================================================
# CATALOG
# =============================================================================


class MovieSummary(BaseModel):
    """Catalog movie as listed."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    tmdb_id: int
    title: str
    release_date: date | None = None
    rating_average: float | None = None
    popularity: float | None = None
    poster_url: str | None = None
    rental_rate: Decimal | None = None


class MovieDetail(MovieSummary):
    """Catalog movie with every field and resolved references."""

    imdb_id: str | None = None
    original_title: str | None = None
    overview: str | None = None
    runtime: int | None = None
    movie_status: str | None = None
    budget: int | None = None
    revenue: int | None = None
    rating_count: int | None = None
    rental_duration: int | None = None
    genres: list[str] = Field(default_factory=list)
    countries_of_origin: list[str] = Field(default_factory=list)
    language: str | None = None

    @classmethod
    def from_movie(cls, movie) -> "MovieDetail":
        """Build the detail view, flattening genre, country and language."""
        fields = MovieSummary.model_validate(movie).model_dump()
        return cls(
            **fields,
            imdb_id=movie.imdb_id,
            original_title=movie.original_title,
            overview=movie.overview,
            runtime=movie.runtime,
            movie_status=movie.movie_status,
            budget=movie.budget,
            revenue=movie.revenue,
            rating_count=movie.rating_count,
            rental_duration=movie.rental_duration,
            genres=[genre.name for genre in movie.genres],
            countries_of_origin=[country.iso_code for country in movie.countries],
            language=movie.language.iso_639_1 if movie.language else None,
        )


class MovieListResponse(BaseModel):
    """Paginated movie list response."""

    data: list[MovieSummary]
    meta: PaginatedMeta


# =============================================================================
# UPLOAD SCHEMAS
# =============================================================================


class CamelModel(BaseModel):
    """Base for payloads serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuccessRow(CamelModel):
    """Row inserted by an upload."""

    row_number: int
    id: int


class FailedRow(CamelModel):
    """Row rejected by an upload or a validation."""

    row_number: int
    reasons: list[str]


class UploadSummaryResponse(CamelModel):
    """Result of a buffered upload."""

    total_rows: int
    success_rows: list[SuccessRow]
    failed_rows: list[FailedRow]


class TrackingResponse(CamelModel):
    """Accepted upload, to be followed on its tracking stream."""

    tracking_url: str
    upload_id: str


class ValidationResponse(CamelModel):
    """Result of a validate-only upload."""

    total_rows: int
    invalid_rows: list[FailedRow]


class UploadErrorDetail(CamelModel):
    """Row-level error returned when a fail-fast upload is rolled back."""

    row_number: int
    kind: str
    message: str
    field: dict[str, str | None] | None = None


class ErrorResponse(BaseModel):
    """Generic error payload."""

    message: str
