"""Catalog movie loader.

Inserts one validated upload row as a movie with its genre and
country links, and reports the generated identifiers.
"""

from decimal import Decimal

from src.database.models import Movie
from src.database.models.catalog.movie import DEFAULT_RENTAL_RATE
from src.database.repositories import CountryRepository, GenreRepository, MovieRepository
from src.etl.loaders.base import BaseLoader, CreatedRecord
from src.etl.types import ParsedRow


def _unique_ids(ids: list[int | None]) -> list[int]:
    """Drop None entries and duplicates, keeping order."""
    return list(dict.fromkeys(i for i in ids if i is not None))


class MovieLoader(BaseLoader[ParsedRow]):
    """Loader for uploaded movie rows.

    Expects rows that already passed MovieRowValidator; database
    errors (unique violations included) propagate to the caller.
    """

    name = "catalog.movie"

    def create(self, row: ParsedRow) -> CreatedRecord:
        """Insert a movie and flush it.

        Args:
            row: Validated row.

        Returns:
            Generated id and the stored tmdb_id.
        """
        movie = Movie(
            tmdb_id=row.tmdb_id,
            imdb_id=row.imdb_id,
            title=row.title,
            original_title=row.original_title,
            overview=row.overview,
            runtime=row.runtime,
            release_date=row.release_date,
            movie_status=row.movie_status,
            language_id=row.language_id,
            popularity=row.popularity,
            rating_average=row.rating_average,
            rating_count=row.rating_count,
            budget=row.budget,
            revenue=row.revenue,
            poster_url=row.poster_url,
            rental_rate=self._rental_rate(row.rental_rate),
        )
        movie.genres = GenreRepository(self._session).get_by_ids(_unique_ids(row.genre_ids))
        movie.countries = CountryRepository(self._session).get_by_ids(_unique_ids(row.origin_country_ids))

        MovieRepository(self._session).create(movie)
        self._logger.debug(f"Created movie {movie.id} (tmdb_id={movie.tmdb_id})")
        return CreatedRecord(id=movie.id, tmdb_id=movie.tmdb_id)

    @staticmethod
    def _rental_rate(value: float | None) -> Decimal:
        """Convert the rental rate, store default when absent."""
        if value is None:
            return DEFAULT_RENTAL_RATE
        return Decimal(str(value)).quantize(Decimal("0.01"))
