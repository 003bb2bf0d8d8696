"""Movie repository with specialized query methods.

Provides duplicate lookups for bulk uploads and paginated,
relation-loaded reads for the catalog endpoints.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from src.database.models.catalog import Movie
from src.database.repositories.base import BaseRepository


class MovieRepository(BaseRepository[Movie]):
    """Repository for Movie entity operations."""

    model = Movie

    def __init__(self, session: Session) -> None:
        """Initialize movie repository.

        Args:
            session: SQLAlchemy session instance.
        """
        super().__init__(session)

    def exists_by_tmdb_id(self, tmdb_id: int) -> bool:
        """Check if a movie with this TMDB ID exists."""
        return self.exists_by_field("tmdb_id", tmdb_id)

    def exists_by_imdb_id(self, imdb_id: str) -> bool:
        """Check if a movie with this IMDb ID exists."""
        return self.exists_by_field("imdb_id", imdb_id)

    def get_with_relations(self, movie_id: int) -> Movie | None:
        """Retrieve movie with genres, countries and language loaded.

        Args:
            movie_id: Primary key.

        Returns:
            Movie instance or None.
        """
        stmt = (
            select(Movie)
            .options(
                selectinload(Movie.genres),
                selectinload(Movie.countries),
                selectinload(Movie.language),
            )
            .where(Movie.id == movie_id)
        )
        return self._session.scalars(stmt).first()

    def get_page(self, offset: int, limit: int) -> list[Movie]:
        """Retrieve a page of movies ordered by id.

        Args:
            offset: Number of movies to skip.
            limit: Maximum number of movies.

        Returns:
            Movies with relations loaded.
        """
        stmt = (
            select(Movie)
            .options(
                selectinload(Movie.genres),
                selectinload(Movie.countries),
                selectinload(Movie.language),
            )
            .order_by(Movie.id)
            .offset(offset)
            .limit(limit)
        )
        return list(self._session.scalars(stmt).all())
