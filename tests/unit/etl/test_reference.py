"""Unit tests for the catalog reference tables."""

from __future__ import annotations

import pytest

from src.etl.reference import (
    COUNTRIES,
    COUNTRY_ENTRIES,
    GENRE_ENTRIES,
    GENRES,
    LANGUAGE_ENTRIES,
    LANGUAGES,
    lookup_id,
)


class TestReferenceTables:
    @staticmethod
    @pytest.mark.parametrize("entries", [GENRE_ENTRIES, COUNTRY_ENTRIES, LANGUAGE_ENTRIES])
    def test_ids_and_codes_are_unique(entries) -> None:  # noqa: ANN001
        assert len({entry.id for entry in entries}) == len(entries)
        assert len({entry.code.upper() for entry in entries}) == len(entries)

    @staticmethod
    def test_known_ids() -> None:
        assert GENRES["SCIENCE FICTION"] == 15
        assert COUNTRIES["MX"] == 18
        assert LANGUAGES["EN"] == 1


class TestLookupId:
    @staticmethod
    def test_case_and_spaces_ignored() -> None:
        assert lookup_id(GENRES, "  tv movie ") == 16

    @staticmethod
    @pytest.mark.parametrize("name", ["Cooking", "", None, 3])
    def test_unknown_names(name) -> None:  # noqa: ANN001
        assert lookup_id(GENRES, name) is None
