"""Catalog database engine and sessions.

PostgreSQL in deployment, SQLite for local demos and tests. The API
builds its own session factory (src.api.database); scripts and the
CLI go through get_database().
"""

from collections.abc import Generator
from contextlib import contextmanager
from functools import lru_cache
from typing import Any

from sqlalchemy import Engine, create_engine, event, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.database.models import Base
from src.etl.utils.logger import setup_logger
from src.settings import settings

logger = setup_logger("database.connection")


def build_engine(url: str | None = None, **engine_kwargs: Any) -> Engine:
    """Create an engine for the catalog database.

    Args:
        url: Connection URL, settings.database.sync_url when None.
        **engine_kwargs: Extra create_engine arguments (SQLite only,
            e.g. poolclass=StaticPool for in-memory tests).

    Returns:
        Engine; SQLite engines have working SAVEPOINTs.
    """
    db = settings.database
    url = url or db.sync_url

    if url.startswith("sqlite"):
        # Sessions move between threadpool workers
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=settings.debug,
            **engine_kwargs,
        )
        _enable_sqlite_savepoints(engine)
        return engine

    return create_engine(
        url,
        pool_size=db.pool_size,
        max_overflow=db.pool_overflow,
        pool_timeout=db.pool_timeout,
        pool_pre_ping=True,
        echo=settings.debug,
    )


def _enable_sqlite_savepoints(engine: Engine) -> None:
    """Take transaction control away from pysqlite so SAVEPOINT works."""

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, _connection_record) -> None:  # noqa: ANN001
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:  # noqa: ANN001
        conn.exec_driver_sql("BEGIN")


class Database:
    """Engine plus session factory, with schema helpers for scripts.

    Example:
        ```python
        with get_database().session() as session:
            MovieRepository(session).count()
        ```
    """

    def __init__(self, url: str | None = None) -> None:
        self.engine = build_engine(url)
        self._session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Session committed on success, rolled back on error, always closed."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def is_reachable(self) -> bool:
        """Run SELECT 1; log and return False on failure."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Database connection failed: {e}")
            return False
        return True

    def table_names(self) -> list[str]:
        """Existing tables, sorted."""
        return sorted(inspect(self.engine).get_table_names())

    def create_tables(self) -> None:
        """Create missing catalog tables."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop every catalog table."""
        Base.metadata.drop_all(self.engine)

    def dispose(self) -> None:
        """Close pooled connections."""
        self.engine.dispose()


@lru_cache(maxsize=1)
def get_database() -> Database:
    """Process-wide Database built from settings."""
    return Database()
