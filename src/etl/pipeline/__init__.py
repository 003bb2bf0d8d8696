"""Bulk upload pipeline package.

Public API:
    - IngestionRun: One CSV upload, all operating modes
    - AtomicUploadAborted: Fail-fast upload stopped and rolled back
    - check_event_delay: Validate-only delay bound check
"""

from src.etl.pipeline.ingestion import AtomicUploadAborted, IngestionRun, check_event_delay

__all__ = [
    "IngestionRun",
    "AtomicUploadAborted",
    "check_event_delay",
]
