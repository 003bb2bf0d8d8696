"""Centralized configuration for the Reelfake API.

Every value comes from environment variables or the .env file.
The JWT secret has no default and must be configured; the other
sections fall back to values suited to local development.

Usage:
    from src.settings import settings

    settings.database.sync_url
    settings.upload.max_event_delay_ms
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.settings.api import APISettings, CORSSettings, SecuritySettings
from src.settings.base import LoggingSettings
from src.settings.database import DatabaseSettings
from src.settings.upload import UploadSettings

__all__ = [
    "APISettings",
    "CORSSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "SecuritySettings",
    "Settings",
    "UploadSettings",
    "get_masked_settings",
    "settings",
]

ENVIRONMENTS = ("development", "production", "test")

# (section, key) pairs never written to logs
SECRET_FIELDS = (
    ("database", "password"),
    ("database", "url"),
    ("security", "jwt_secret_key"),
    ("security", "demo_users_raw"),
)
MASK = "***MASKED***"


class Settings(BaseSettings):
    """Application settings, one attribute per configuration section."""

    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    api: APISettings = Field(default_factory=APISettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Lower-case the environment name and reject unknown ones."""
        environment = v.strip().lower()
        if environment not in ENVIRONMENTS:
            raise ValueError(f"ENVIRONMENT must be one of {', '.join(ENVIRONMENTS)}")
        return environment


settings = Settings()


def get_masked_settings() -> dict[str, Any]:
    """Dump the settings with secrets replaced, for startup logs.

    Returns:
        Nested configuration dictionary.
    """
    config = settings.model_dump()
    for section, key in SECRET_FIELDS:
        if config.get(section, {}).get(key):
            config[section][key] = MASK
    return config
