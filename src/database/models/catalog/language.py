"""MovieLanguage model for the original language of movies.

Stores ISO 639-1 language codes and names.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.database.models.base import Base


class MovieLanguage(Base):
    """Movie language reference table.

    Attributes:
        id: Primary key, matches the upload reference table.
        iso_639_1: ISO language code (e.g., 'en', 'fr').
        name: Language name in English.
    """

    __tablename__ = "movie_languages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    iso_639_1: Mapped[str] = mapped_column(
        String(10),
        unique=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<MovieLanguage(iso='{self.iso_639_1}', name='{self.name}')>"
