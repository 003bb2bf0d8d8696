"""
Base repository shared by catalog repositories.

Lookups by primary key, existence checks on a column, counting, and flushed
inserts. Callers own the transaction.
"""

from datetime import date
from decimal import Decimal
from typing import Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from src.database.models.base import Base

# Values stored in catalog columns
FieldValue = str | int | float | date | Decimal | None

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Generic repository over one mapped model.

    Attributes:
        model: SQLAlchemy model class.
    """

    model: type[ModelT]

    def __init__(self, session: Session) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session instance.
        """
        self._session = session

    def get_by_id(self, entity_id: int) -> ModelT | None:
        """Retrieve entity by primary key."""
        return self._session.get(self.model, entity_id)

    def exists_by_field(self, field_name: str, value: FieldValue) -> bool:
        """Check whether a row with the column value exists.

        Selects the column only, so no entity is loaded.
        """
        column = getattr(self.model, field_name)
        stmt = select(column).where(column == value).limit(1)
        return self._session.execute(stmt).first() is not None

    def count(self) -> int:
        """Count rows of the model table."""
        return self._session.execute(select(func.count()).select_from(self.model)).scalar() or 0

    def create(self, entity: ModelT) -> ModelT:
        """Add an entity and flush it so its primary key is assigned."""
        self._session.add(entity)
        self._session.flush()
        return entity

    def create_many(self, entities: list[ModelT]) -> list[ModelT]:
        """Add entities and flush them.

        Args:
            entities: Entity instances.

        Returns:
            The same entities with generated keys.
        """
        self._session.add_all(entities)
        self._session.flush()
        return entities
