"""FastAPI application for the Reelfake catalog.

Mounts the catalog, bulk upload, authentication and health routers
under /api/v1.

Run:
    uvicorn src.api.main:app
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from src.api.database import get_engine
from src.api.routers import auth, health, movie_upload, movies
from src.api.services.upload_registry import get_upload_registry
from src.etl.utils.logger import setup_logger
from src.settings import get_masked_settings, settings

logger = setup_logger("api.main")

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Check configuration and database on startup; drop pending uploads on shutdown."""
    logger.debug(f"Settings: {get_masked_settings()}")
    if not settings.security.is_secure:
        logger.warning("JWT_SECRET_KEY is shorter than 32 characters")
    _verify_database_connection()
    yield
    get_upload_registry().clear()
    logger.info("Pending uploads discarded")


def _verify_database_connection() -> None:
    """Fail startup when the database is unreachable."""
    with get_engine().connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("Database connection verified")


def create_app() -> FastAPI:
    """Build the application.

    The upload router is included before the catalog router so that
    /movies/upload is not matched as /movies/{movie_id}.
    """
    app = FastAPI(
        title=settings.api.title,
        version=settings.api.version,
        description="Movie rental catalog with bulk CSV uploads",
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type"],
    )
    for router in (health.router, auth.router, movie_upload.router, movies.router):
        app.include_router(router, prefix=API_PREFIX)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
    )
