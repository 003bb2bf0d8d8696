"""MovieGenre association table.

Many-to-many relationship between Movie and Genre.
"""

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from src.database.models.base import Base


class MovieGenre(Base):
    """Association table for Movie-Genre relationship.

    Attributes:
        movie_id: Foreign key to movies.
        genre_id: Foreign key to genres.
    """

    __tablename__ = "movie_genres"

    movie_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("movies.id", ondelete="CASCADE"),
        primary_key=True,
    )
    genre_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("genres.id", ondelete="CASCADE"),
        primary_key=True,
    )
