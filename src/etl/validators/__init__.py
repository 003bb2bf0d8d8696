"""Row validation for bulk movie uploads."""

from src.etl.validators.movie_row import MovieRowValidator, format_reason
from src.etl.validators.schemas import MovieRecord

__all__ = ["MovieRecord", "MovieRowValidator", "format_reason"]
