"""Catalog database settings.

PostgreSQL in deployment. DATABASE_URL overrides the individual
fields, which is how local demos and tests point at SQLite.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from src.settings.base import ENV_CONFIG


class DatabaseSettings(BaseSettings):
    """Connection and pool configuration.

    Attributes:
        host: PostgreSQL host.
        port: PostgreSQL port.
        database: Database name.
        user: Role used by the API.
        password: Role password.
        url: Full SQLAlchemy URL, takes precedence when set.
        pool_size: Persistent connections per process.
        pool_overflow: Extra connections allowed under load.
        pool_timeout: Seconds to wait for a free connection.
    """

    host: str = Field(default="localhost", alias="POSTGRES_HOST")
    port: int = Field(default=5432, alias="POSTGRES_PORT")
    database: str = Field(default="reelfake", alias="POSTGRES_DB")
    user: str = Field(default="reelfake_user", alias="POSTGRES_USER")
    password: str = Field(default="", alias="POSTGRES_PASSWORD")
    url: str | None = Field(default=None, alias="DATABASE_URL")

    pool_size: int = Field(default=5, alias="DB_POOL_SIZE")
    pool_overflow: int = Field(default=10, alias="DB_POOL_OVERFLOW")
    pool_timeout: int = Field(default=30, alias="DB_POOL_TIMEOUT")

    model_config = ENV_CONFIG

    @field_validator("url")
    @classmethod
    def blank_url_is_unset(cls, v: str | None) -> str | None:
        """Treat an empty DATABASE_URL as absent."""
        if v is None:
            return None
        return v.strip() or None

    @property
    def sync_url(self) -> str:
        """SQLAlchemy URL of the catalog database."""
        if self.url:
            return self.url
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"

    @property
    def is_sqlite(self) -> bool:
        """True when the catalog lives in SQLite."""
        return self.sync_url.startswith("sqlite")
