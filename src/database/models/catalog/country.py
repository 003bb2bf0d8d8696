"""Country model for movie origin.

Stores ISO 3166-1 alpha-2 codes and names.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.models.base import Base

if TYPE_CHECKING:
    from src.database.models.catalog.movie import Movie


class Country(Base):
    """Country of origin reference table.

    Attributes:
        id: Primary key, matches the upload reference table.
        iso_code: ISO 3166-1 alpha-2 code (e.g., 'US', 'FR').
        name: Country name in English.
    """

    __tablename__ = "countries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    iso_code: Mapped[str] = mapped_column(
        String(2),
        unique=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Relationships
    movies: Mapped[list["Movie"]] = relationship(
        "Movie",
        secondary="movie_countries",
        back_populates="countries",
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Country(iso='{self.iso_code}', name='{self.name}')>"
