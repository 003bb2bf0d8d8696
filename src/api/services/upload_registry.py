"""In-memory registry of uploads awaiting their tracking stream.

A tracked upload is saved to disk and registered here; the matching
track endpoint claims it exactly once. Unclaimed uploads expire after
a configurable timeout and their files are deleted.
"""

import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from uuid import uuid4

from src.etl.utils.logger import setup_logger
from src.settings import settings

logger = setup_logger("api.services.upload_registry")

KIND_IMPORT = "import"
KIND_VALIDATION = "validation"


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass
class PendingUpload:
    """Uploaded file waiting for its tracking stream.

    Attributes:
        upload_id: Identifier returned to the client.
        file_path: Saved CSV file.
        kind: "import" or "validation".
        owner: Subject of the uploading user.
        stop_on_error: Fail-fast import requested.
        delay_ms: Validate-only delay between rows.
        created_at: Registration timestamp.
    """

    upload_id: str
    file_path: Path
    kind: str
    owner: str
    stop_on_error: bool = False
    delay_ms: int = 0
    created_at: float = field(default_factory=time.time)


# =============================================================================
# UPLOAD REGISTRY
# =============================================================================


class UploadRegistry:
    """Thread-safe store of pending uploads with TTL-based expiration.

    Expired uploads are lazily cleaned up on access.

    Attributes:
        _uploads: Upload ID to PendingUpload mapping.
        _ttl_seconds: Lifetime of an unclaimed upload.
        _lock: Thread synchronization lock.
    """

    def __init__(self, ttl_seconds: int | None = None) -> None:
        """Initialize registry.

        Args:
            ttl_seconds: Unclaimed upload lifetime (settings default).
        """
        self._uploads: dict[str, PendingUpload] = {}
        self._ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.upload.pending_ttl_seconds
        self._lock = threading.Lock()

    def register(
        self,
        file_path: Path,
        kind: str,
        owner: str,
        stop_on_error: bool = False,
        delay_ms: int = 0,
    ) -> PendingUpload:
        """Register a saved upload under a new identifier.

        Args:
            file_path: Saved CSV file.
            kind: "import" or "validation".
            owner: Subject of the uploading user.
            stop_on_error: Fail-fast import requested.
            delay_ms: Validate-only delay between rows.

        Returns:
            The registered upload.
        """
        upload = PendingUpload(
            upload_id=uuid4().hex,
            file_path=file_path,
            kind=kind,
            owner=owner,
            stop_on_error=stop_on_error,
            delay_ms=delay_ms,
        )
        with self._lock:
            self._cleanup_expired()
            self._uploads[upload.upload_id] = upload
        logger.debug(f"Upload registered: {upload.upload_id} ({kind})")
        return upload

    def claim(self, upload_id: str, kind: str, owner: str) -> PendingUpload | None:
        """Remove and return a pending upload.

        Args:
            upload_id: Identifier returned at registration.
            kind: Expected upload kind.
            owner: Subject of the user claiming the upload.

        Returns:
            The upload, or None if unknown, expired, already claimed,
            of another kind or registered by another user.
        """
        with self._lock:
            self._cleanup_expired()
            upload = self._uploads.get(upload_id)
            if upload is None or upload.kind != kind or upload.owner != owner:
                return None
            del self._uploads[upload_id]
            return upload

    def pending_count(self) -> int:
        """Return count of pending (non-expired) uploads."""
        with self._lock:
            self._cleanup_expired()
            return len(self._uploads)

    def clear(self) -> None:
        """Drop every pending upload and delete its file."""
        with self._lock:
            for upload in self._uploads.values():
                upload.file_path.unlink(missing_ok=True)
            self._uploads.clear()

    def _cleanup_expired(self) -> None:
        """Remove uploads that have exceeded TTL.

        Must be called with lock held.
        """
        now = time.time()
        expired = [uid for uid, u in self._uploads.items() if (now - u.created_at) > self._ttl_seconds]
        for uid in expired:
            self._uploads.pop(uid).file_path.unlink(missing_ok=True)
            logger.debug(f"Upload expired: {uid}")


# =============================================================================
# SINGLETON
# =============================================================================

_upload_registry: UploadRegistry | None = None


def get_upload_registry() -> UploadRegistry:
    """Get singleton UploadRegistry instance.

    Returns:
        Configured UploadRegistry.
    """
    global _upload_registry  # noqa: PLW0603
    if _upload_registry is None:
        _upload_registry = UploadRegistry()
    return _upload_registry
