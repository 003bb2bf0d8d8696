"""Catalog reference tables.

Fixed name -> id lookup tables for genres, countries of origin and
movie languages. The CSV normalizer resolves tag names through these
tables and the database seeder writes the same rows, so resolved ids
always match the reference tables.
"""

from typing import NamedTuple


class ReferenceEntry(NamedTuple):
    """One row of a reference table.

    Attributes:
        id: Stable identifier stored on movie records.
        code: Lookup code (genre name, ISO country or language code).
        name: Display name.
    """

    id: int
    code: str
    name: str


GENRE_ENTRIES: tuple[ReferenceEntry, ...] = (
    ReferenceEntry(1, "Action", "Action"),
    ReferenceEntry(2, "Adventure", "Adventure"),
    ReferenceEntry(3, "Animation", "Animation"),
    ReferenceEntry(4, "Comedy", "Comedy"),
    ReferenceEntry(5, "Crime", "Crime"),
    ReferenceEntry(6, "Documentary", "Documentary"),
    ReferenceEntry(7, "Drama", "Drama"),
    ReferenceEntry(8, "Family", "Family"),
    ReferenceEntry(9, "Fantasy", "Fantasy"),
    ReferenceEntry(10, "History", "History"),
    ReferenceEntry(11, "Horror", "Horror"),
    ReferenceEntry(12, "Music", "Music"),
    ReferenceEntry(13, "Mystery", "Mystery"),
    ReferenceEntry(14, "Romance", "Romance"),
    ReferenceEntry(15, "Science Fiction", "Science Fiction"),
    ReferenceEntry(16, "TV Movie", "TV Movie"),
    ReferenceEntry(17, "Thriller", "Thriller"),
    ReferenceEntry(18, "War", "War"),
    ReferenceEntry(19, "Western", "Western"),
)

COUNTRY_ENTRIES: tuple[ReferenceEntry, ...] = (
    ReferenceEntry(1, "AR", "Argentina"),
    ReferenceEntry(2, "AU", "Australia"),
    ReferenceEntry(3, "BE", "Belgium"),
    ReferenceEntry(4, "BR", "Brazil"),
    ReferenceEntry(5, "CA", "Canada"),
    ReferenceEntry(6, "CN", "China"),
    ReferenceEntry(7, "DE", "Germany"),
    ReferenceEntry(8, "DK", "Denmark"),
    ReferenceEntry(9, "ES", "Spain"),
    ReferenceEntry(10, "FR", "France"),
    ReferenceEntry(11, "GB", "United Kingdom"),
    ReferenceEntry(12, "HK", "Hong Kong"),
    ReferenceEntry(13, "IE", "Ireland"),
    ReferenceEntry(14, "IN", "India"),
    ReferenceEntry(15, "IT", "Italy"),
    ReferenceEntry(16, "JP", "Japan"),
    ReferenceEntry(17, "KR", "South Korea"),
    ReferenceEntry(18, "MX", "Mexico"),
    ReferenceEntry(19, "NL", "Netherlands"),
    ReferenceEntry(20, "NO", "Norway"),
    ReferenceEntry(21, "NZ", "New Zealand"),
    ReferenceEntry(22, "RU", "Russia"),
    ReferenceEntry(23, "SE", "Sweden"),
    ReferenceEntry(24, "TH", "Thailand"),
    ReferenceEntry(25, "US", "United States of America"),
)

LANGUAGE_ENTRIES: tuple[ReferenceEntry, ...] = (
    ReferenceEntry(1, "en", "English"),
    ReferenceEntry(2, "fr", "French"),
    ReferenceEntry(3, "es", "Spanish"),
    ReferenceEntry(4, "de", "German"),
    ReferenceEntry(5, "it", "Italian"),
    ReferenceEntry(6, "ja", "Japanese"),
    ReferenceEntry(7, "ko", "Korean"),
    ReferenceEntry(8, "zh", "Chinese"),
    ReferenceEntry(9, "hi", "Hindi"),
    ReferenceEntry(10, "pt", "Portuguese"),
    ReferenceEntry(11, "ru", "Russian"),
    ReferenceEntry(12, "sv", "Swedish"),
    ReferenceEntry(13, "da", "Danish"),
    ReferenceEntry(14, "no", "Norwegian"),
    ReferenceEntry(15, "th", "Thai"),
    ReferenceEntry(16, "nl", "Dutch"),
)


def _build_lookup(entries: tuple[ReferenceEntry, ...]) -> dict[str, int]:
    """Index entries by upper-cased code."""
    return {entry.code.upper(): entry.id for entry in entries}


# Upper-cased code -> id
GENRES: dict[str, int] = _build_lookup(GENRE_ENTRIES)
COUNTRIES: dict[str, int] = _build_lookup(COUNTRY_ENTRIES)
LANGUAGES: dict[str, int] = _build_lookup(LANGUAGE_ENTRIES)

VALID_GENRE_IDS: frozenset[int] = frozenset(GENRES.values())
VALID_COUNTRY_IDS: frozenset[int] = frozenset(COUNTRIES.values())
VALID_LANGUAGE_IDS: frozenset[int] = frozenset(LANGUAGES.values())


def lookup_id(table: dict[str, int], name: object) -> int | None:
    """Resolve a tag name to its id, ignoring case and surrounding spaces.

    Args:
        table: One of GENRES, COUNTRIES or LANGUAGES.
        name: Raw tag name from the CSV.

    Returns:
        Reference id, or None when the name is unknown.
    """
    if not isinstance(name, str):
        return None
    return table.get(name.strip().upper())
