"""Catalog database: connection, ORM models and repositories.

Usage:
    from src.database import get_database, MovieRepository

    with get_database().session() as session:
        exists = MovieRepository(session).exists_by_tmdb_id(603)
"""

from src.database.connection import Database, build_engine, get_database
from src.database.models import (
    Base,
    Country,
    Genre,
    Movie,
    MovieCountry,
    MovieGenre,
    MovieLanguage,
)
from src.database.repositories import (
    BaseRepository,
    CountryRepository,
    GenreRepository,
    MovieLanguageRepository,
    MovieRepository,
    seed_reference_data,
)

__all__ = [
    "Base",
    "BaseRepository",
    "Country",
    "CountryRepository",
    "Database",
    "Genre",
    "GenreRepository",
    "Movie",
    "MovieCountry",
    "MovieGenre",
    "MovieLanguage",
    "MovieLanguageRepository",
    "MovieRepository",
    "build_engine",
    "get_database",
    "seed_reference_data",
]
