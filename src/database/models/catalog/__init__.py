"""Catalog models.

Movies with their genre, country and language reference tables.
"""

from src.database.models.catalog.country import Country
from src.database.models.catalog.genre import Genre
from src.database.models.catalog.language import MovieLanguage
from src.database.models.catalog.movie import Movie
from src.database.models.catalog.movie_country import MovieCountry
from src.database.models.catalog.movie_genre import MovieGenre

__all__ = [
    "Movie",
    "Genre",
    "Country",
    "MovieLanguage",
    "MovieGenre",
    "MovieCountry",
]
