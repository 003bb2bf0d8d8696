"""Loader interface for writing validated rows to the catalog.

A loader inserts one row at a time with create(). The caller owns
the transaction and any savepoint around the insert.
"""

from abc import ABC, abstractmethod
from typing import Generic, NamedTuple, TypeVar

from sqlalchemy.orm import Session

from src.etl.utils.logger import setup_logger

RowT = TypeVar("RowT")


class CreatedRecord(NamedTuple):
    """Keys of a freshly inserted movie.

    Attributes:
        id: Generated primary key.
        tmdb_id: TMDB identifier as stored, compared against the row
            to detect persistence mismatches.
    """

    id: int
    tmdb_id: int


class BaseLoader(ABC, Generic[RowT]):
    """Writes rows of type RowT through a session it does not own.

    Attributes:
        name: Suffix of the loader's logger name.
    """

    name: str = "base"

    def __init__(self, session: Session) -> None:
        self._session = session
        self._logger = setup_logger(f"etl.loader.{self.name}")

    @abstractmethod
    def create(self, row: RowT) -> CreatedRecord:
        """Insert one row and flush it.

        Raises:
            SQLAlchemyError: On constraint or database failure; the
                caller decides whether to roll back.
        """
