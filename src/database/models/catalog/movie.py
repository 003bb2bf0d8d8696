"""Movie model - main entity of the rental catalog.

Primary table holding the movie records created by bulk uploads.
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Date,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    SmallInteger,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.models.base import Base, TimestampMixin
from src.database.models.catalog.language import MovieLanguage

if TYPE_CHECKING:
    from src.database.models.catalog.country import Country
    from src.database.models.catalog.genre import Genre

DEFAULT_RENTAL_RATE = Decimal("4.99")
DEFAULT_RENTAL_DURATION = 5


class Movie(Base, TimestampMixin):
    """Catalog movie available for rental.

    Attributes:
        id: Internal primary key.
        tmdb_id: TMDB identifier (unique upload key).
        imdb_id: IMDb identifier (format: tt1234567).
        title: Movie title.
        language_id: Original language reference.
        rental_rate: Rental price per period.
        rental_duration: Rental period in days.
    """

    __tablename__ = "movies"

    # Primary keys and identifiers
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tmdb_id: Mapped[int] = mapped_column(
        Integer,
        unique=True,
        nullable=False,
        index=True,
    )
    imdb_id: Mapped[str | None] = mapped_column(String(60), unique=True)

    # Basic information
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    original_title: Mapped[str] = mapped_column(String(255), nullable=False)
    overview: Mapped[str | None] = mapped_column(Text)
    runtime: Mapped[int] = mapped_column(SmallInteger, default=0)
    release_date: Mapped[date] = mapped_column(Date, nullable=False)
    movie_status: Mapped[str] = mapped_column(String(20), nullable=False)
    language_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("movie_languages.id"),
        nullable=False,
    )

    # TMDB metrics
    popularity: Mapped[float] = mapped_column(Float, default=0)
    rating_average: Mapped[float] = mapped_column(Float, default=0)
    rating_count: Mapped[int] = mapped_column(Integer, default=0)

    # Financial data
    budget: Mapped[int] = mapped_column(BigInteger, default=0)
    revenue: Mapped[int] = mapped_column(BigInteger, default=0)

    # Media
    poster_url: Mapped[str | None] = mapped_column(String(255))

    # Rental terms
    rental_rate: Mapped[Decimal] = mapped_column(Numeric(4, 2), default=DEFAULT_RENTAL_RATE)
    rental_duration: Mapped[int] = mapped_column(SmallInteger, default=DEFAULT_RENTAL_DURATION)

    # Relationships
    genres: Mapped[list["Genre"]] = relationship(
        "Genre",
        secondary="movie_genres",
        back_populates="movies",
    )
    countries: Mapped[list["Country"]] = relationship(
        "Country",
        secondary="movie_countries",
        back_populates="movies",
    )
    language: Mapped[MovieLanguage] = relationship("MovieLanguage")

    # Table constraints
    __table_args__ = (
        CheckConstraint("rating_average >= 0 AND rating_average <= 10", name="chk_rating_average"),
        CheckConstraint("runtime >= 0", name="chk_runtime"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Movie(id={self.id}, tmdb_id={self.tmdb_id}, title='{self.title}')>"
