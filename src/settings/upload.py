"""Bulk movie upload settings.

Where uploaded CSV files are stored, how long a tracked upload waits
for its stream, and the bound of the validate-only demo delay.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from src.settings.base import ENV_CONFIG, PROJECT_ROOT


class UploadSettings(BaseSettings):
    """CSV upload pipeline configuration.

    Attributes:
        upload_dir: Override for the uploaded files directory.
        max_event_delay_ms: Upper bound for the validate-only demo delay.
        pending_ttl_seconds: Lifetime of an unclaimed tracked upload.
        chunk_size: Bytes copied per read when saving an upload.
    """

    upload_dir: str | None = Field(default=None, alias="UPLOAD_DIR")
    max_event_delay_ms: int = Field(default=1000, ge=0, alias="UPLOAD_MAX_EVENT_DELAY_MS")
    pending_ttl_seconds: int = Field(default=900, gt=0, alias="UPLOAD_PENDING_TTL_SECONDS")
    chunk_size: int = Field(default=64 * 1024, gt=0, alias="UPLOAD_CHUNK_SIZE")

    model_config = ENV_CONFIG

    @property
    def directory(self) -> Path:
        """Directory where uploaded CSV files are written."""
        if self.upload_dir:
            return Path(self.upload_dir)
        return PROJECT_ROOT / "data" / "uploads"
