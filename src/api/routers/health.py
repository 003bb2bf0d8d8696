"""Liveness endpoint reporting database reachability."""

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.api.database import get_engine
from src.api.schemas import DatabaseComponentHealth, HealthComponents, HealthResponse
from src.etl.utils.logger import setup_logger
from src.settings import settings

logger = setup_logger("api.routers.health")

router = APIRouter(tags=["Health"])


def check_database() -> DatabaseComponentHealth:
    """Run a trivial query against the catalog database."""
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning(f"Database unreachable: {exc}")
        return DatabaseComponentHealth(connected=False)
    return DatabaseComponentHealth(connected=True)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Always 200; status is 'degraded' when the database is unreachable.",
)
def health_check() -> HealthResponse:
    """Report API and database status. No authentication."""
    database = check_database()
    return HealthResponse(
        status="healthy" if database.connected else "degraded",
        version=settings.api.version,
        components=HealthComponents(database=database),
    )
