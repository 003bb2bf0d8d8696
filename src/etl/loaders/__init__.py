"""ETL loaders package.

Provides loaders inserting validated upload rows into the
catalog database.
"""

from src.etl.loaders.base import BaseLoader, CreatedRecord
from src.etl.loaders.catalog import MovieLoader

__all__ = [
    "BaseLoader",
    "CreatedRecord",
    "MovieLoader",
]
