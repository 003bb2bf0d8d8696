"""Engine, session factory and per-request session dependency."""

from collections.abc import Generator
from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from src.database.connection import build_engine


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Process-wide engine built from settings."""
    return build_engine()


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker[Session]:
    """Process-wide session factory.

    Streaming endpoints depend on it directly: their session must
    outlive the request handler and is closed by the stream itself.
    """
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session, committed when the handler succeeds.

    Yields:
        Session closed once the response is ready.
    """
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
