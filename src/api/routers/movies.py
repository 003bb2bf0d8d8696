"""Catalog movie endpoints for REST API.

Provides read-only endpoints for listing and retrieving movies
with JWT authentication.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from src.api.database import get_db
from src.api.dependencies.auth import CurrentUser
from src.api.schemas import (
    MovieDetail,
    MovieListResponse,
    MovieSummary,
    PaginatedMeta,
    PaginationParams,
)
from src.database.repositories.catalog import MovieRepository

router = APIRouter(prefix="/movies", tags=["Movies"])


# =============================================================================
# DEPENDENCIES
# =============================================================================


def get_pagination(
    page: Annotated[int, Query(ge=1, le=1000)] = 1,
    size: Annotated[int, Query(ge=1, le=100)] = 20,
) -> PaginationParams:
    """Parse and validate pagination parameters.

    Args:
        page: Page number (1-indexed).
        size: Items per page.

    Returns:
        Validated pagination parameters.
    """
    return PaginationParams(page=page, size=size)


# =============================================================================
# ENDPOINTS
# =============================================================================


@router.get(
    "",
    response_model=MovieListResponse,
    summary="List movies",
    description="Get paginated list of catalog movies ordered by id.",
)
def list_movies(
    _user: CurrentUser,
    db: Annotated[Session, Depends(get_db)],
    pagination: Annotated[PaginationParams, Depends(get_pagination)],
) -> MovieListResponse:
    """Get paginated movie list.

    Args:
        _user: Authenticated user (JWT validated).
        db: Database session.
        pagination: Pagination parameters.

    Returns:
        Paginated list of movies with metadata.
    """
    repository = MovieRepository(db)
    movies = repository.get_page(pagination.offset, pagination.size)
    return MovieListResponse(
        data=[MovieSummary.model_validate(m) for m in movies],
        meta=PaginatedMeta.from_params(pagination, repository.count()),
    )


@router.get(
    "/{movie_id}",
    response_model=MovieDetail,
    summary="Get movie details",
    description="Retrieve a movie with its genres, countries and language.",
)
def get_movie(
    movie_id: int,
    _user: CurrentUser,
    db: Annotated[Session, Depends(get_db)],
) -> MovieDetail:
    """Get movie by ID.

    Args:
        movie_id: Movie primary key.
        _user: Authenticated user (JWT validated).
        db: Database session.

    Returns:
        Detailed movie information.

    Raises:
        HTTPException: 404 if movie not found.
    """
    movie = MovieRepository(db).get_with_relations(movie_id)
    if not movie:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Movie with id {movie_id} not found",
        )
    return MovieDetail.from_movie(movie)
