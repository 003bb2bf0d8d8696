"""Genre model for catalog classification.

Stores the fixed genre reference rows (e.g., Action=1).
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.database.models.base import Base

if TYPE_CHECKING:
    from src.database.models.catalog.movie import Movie


class Genre(Base):
    """Movie genre reference table.

    Attributes:
        id: Primary key, matches the upload reference table.
        name: Genre display name.
        created_at: Creation timestamp.
    """

    __tablename__ = "genres"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    movies: Mapped[list["Movie"]] = relationship(
        "Movie",
        secondary="movie_genres",
        back_populates="genres",
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<Genre(id={self.id}, name='{self.name}')>"
