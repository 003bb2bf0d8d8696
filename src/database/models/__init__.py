"""SQLAlchemy ORM models for the Reelfake catalog database.

This module exports all database models and the Base class
for use throughout the application.

Usage:
    from src.database.models import Base, Movie, Genre

Tables:
    - movies: Catalog movies
    - genres: Genre reference
    - countries: Country of origin reference
    - movie_languages: Language reference
    - movie_genres: Movie-Genre association
    - movie_countries: Movie-Country association
"""

from src.database.models.base import Base, TimestampMixin
from src.database.models.catalog import (
    Country,
    Genre,
    Movie,
    MovieCountry,
    MovieGenre,
    MovieLanguage,
)

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Catalog
    "Movie",
    "Genre",
    "Country",
    "MovieLanguage",
    "MovieGenre",
    "MovieCountry",
]
