"""Catalog repositories: movies and reference tables."""

from src.database.repositories.catalog.movie import MovieRepository
from src.database.repositories.catalog.reference import (
    CountryRepository,
    GenreRepository,
    MovieLanguageRepository,
    seed_reference_data,
)

__all__ = [
    "MovieRepository",
    "GenreRepository",
    "CountryRepository",
    "MovieLanguageRepository",
    "seed_reference_data",
]
