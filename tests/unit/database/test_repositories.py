"""Unit tests for catalog repositories and reference seeding."""

from __future__ import annotations

from sqlalchemy.orm import Session

from src.database.repositories import (
    CountryRepository,
    GenreRepository,
    MovieLanguageRepository,
    MovieRepository,
)
from src.database.repositories.catalog import seed_reference_data
from src.etl.extractors.csv import parse_row
from src.etl.loaders import MovieLoader
from src.etl.reference import COUNTRY_ENTRIES, GENRE_ENTRIES, LANGUAGE_ENTRIES
from src.etl.types import RawRow
from tests.factories import make_raw, movie_rows


def _insert(session: Session, count: int) -> list[int]:
    loader = MovieLoader(session)
    ids = [loader.create(parse_row(RawRow(i + 1, row))).id for i, row in enumerate(movie_rows(count))]
    session.commit()
    return ids


class TestReferenceSeeding:
    @staticmethod
    def test_reference_tables_seeded(db_session: Session) -> None:
        assert GenreRepository(db_session).count() == len(GENRE_ENTRIES)
        assert CountryRepository(db_session).count() == len(COUNTRY_ENTRIES)
        assert MovieLanguageRepository(db_session).count() == len(LANGUAGE_ENTRIES)

    @staticmethod
    def test_seeding_twice_inserts_nothing(db_session: Session) -> None:
        assert seed_reference_data(db_session) == {"genres": 0, "countries": 0, "movie_languages": 0}

    @staticmethod
    def test_get_by_ids(db_session: Session) -> None:
        genres = GenreRepository(db_session).get_by_ids([15, 1])

        assert [genre.name for genre in genres] == ["Action", "Science Fiction"]


class TestMovieRepository:
    @staticmethod
    def test_exists_by_identifiers(db_session: Session) -> None:
        MovieLoader(db_session).create(parse_row(make_raw()))
        repository = MovieRepository(db_session)

        assert repository.exists_by_tmdb_id(27205) is True
        assert repository.exists_by_tmdb_id(1) is False
        assert repository.exists_by_imdb_id("tt1375666") is True
        assert repository.exists_by_imdb_id("tt0000000") is False

    @staticmethod
    def test_get_page(db_session: Session) -> None:
        ids = _insert(db_session, 5)
        repository = MovieRepository(db_session)

        page = repository.get_page(offset=2, limit=2)

        assert [movie.id for movie in page] == ids[2:4]
        assert repository.count() == 5

    @staticmethod
    def test_get_with_relations_missing(db_session: Session) -> None:
        assert MovieRepository(db_session).get_with_relations(999) is None
