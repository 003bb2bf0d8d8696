"""Database repositories for the Reelfake catalog.

Provides repository pattern implementations for the catalog
entities with CRUD and specialized queries.

Usage:
    from src.database.repositories import MovieRepository

    with session_factory() as session:
        repo = MovieRepository(session)
        movie = repo.get_with_relations(1)
"""

from src.database.repositories.base import BaseRepository
from src.database.repositories.catalog import (
    CountryRepository,
    GenreRepository,
    MovieLanguageRepository,
    MovieRepository,
    seed_reference_data,
)

__all__ = [
    "BaseRepository",
    "MovieRepository",
    "GenreRepository",
    "CountryRepository",
    "MovieLanguageRepository",
    "seed_reference_data",
]
