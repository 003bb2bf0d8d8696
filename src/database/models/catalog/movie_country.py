"""MovieCountry association table.

Many-to-many relationship between Movie and Country.
"""

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from src.database.models.base import Base


class MovieCountry(Base):
    """Association table for Movie-Country relationship.

    Attributes:
        movie_id: Foreign key to movies.
        country_id: Foreign key to countries.
    """

    __tablename__ = "movie_countries"

    movie_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("movies.id", ondelete="CASCADE"),
        primary_key=True,
    )
    country_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("countries.id", ondelete="CASCADE"),
        primary_key=True,
    )
