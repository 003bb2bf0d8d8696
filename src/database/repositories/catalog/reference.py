"""Reference table repositories.

Genres, countries and languages are seeded from the fixed upload
reference tables so stored ids always match resolved ids.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.database.models.catalog import Country, Genre, MovieLanguage
from src.database.repositories.base import BaseRepository
from src.etl.reference import (
    COUNTRY_ENTRIES,
    GENRE_ENTRIES,
    LANGUAGE_ENTRIES,
    ReferenceEntry,
)


class GenreRepository(BaseRepository[Genre]):
    """Repository for Genre reference rows."""

    model = Genre

    def get_by_ids(self, ids: list[int]) -> list[Genre]:
        """Retrieve genres by primary keys."""
        stmt = select(Genre).where(Genre.id.in_(ids)).order_by(Genre.id)
        return list(self._session.scalars(stmt).all())

    def seed(self, entries: tuple[ReferenceEntry, ...] = GENRE_ENTRIES) -> int:
        """Insert missing genre rows.

        Args:
            entries: Reference entries to seed.

        Returns:
            Number of rows inserted.
        """
        missing = [entry for entry in entries if self.get_by_id(entry.id) is None]
        self.create_many([Genre(id=entry.id, name=entry.name) for entry in missing])
        return len(missing)


class CountryRepository(BaseRepository[Country]):
    """Repository for Country reference rows."""

    model = Country

    def get_by_ids(self, ids: list[int]) -> list[Country]:
        """Retrieve countries by primary keys."""
        stmt = select(Country).where(Country.id.in_(ids)).order_by(Country.id)
        return list(self._session.scalars(stmt).all())

    def seed(self, entries: tuple[ReferenceEntry, ...] = COUNTRY_ENTRIES) -> int:
        """Insert missing country rows.

        Args:
            entries: Reference entries to seed.

        Returns:
            Number of rows inserted.
        """
        missing = [entry for entry in entries if self.get_by_id(entry.id) is None]
        self.create_many([Country(id=entry.id, iso_code=entry.code, name=entry.name) for entry in missing])
        return len(missing)


class MovieLanguageRepository(BaseRepository[MovieLanguage]):
    """Repository for MovieLanguage reference rows."""

    model = MovieLanguage

    def seed(self, entries: tuple[ReferenceEntry, ...] = LANGUAGE_ENTRIES) -> int:
        """Insert missing language rows.

        Args:
            entries: Reference entries to seed.

        Returns:
            Number of rows inserted.
        """
        missing = [entry for entry in entries if self.get_by_id(entry.id) is None]
        self.create_many(
            [MovieLanguage(id=entry.id, iso_639_1=entry.code, name=entry.name) for entry in missing]
        )
        return len(missing)


def seed_reference_data(session: Session) -> dict[str, int]:
    """Seed every reference table.

    Args:
        session: SQLAlchemy session; the caller commits.

    Returns:
        Inserted row count per table.
    """
    return {
        "genres": GenreRepository(session).seed(),
        "countries": CountryRepository(session).seed(),
        "movie_languages": MovieLanguageRepository(session).seed(),
    }
