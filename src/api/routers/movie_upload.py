"""Bulk movie upload endpoints.

Provides CSV upload into the catalog (buffered or fail-fast), a
validate-only dry run, and Server-Sent Events streams reporting the
progress of tracked uploads row by row.
"""

import json
from collections.abc import AsyncIterator, Iterator
from contextlib import aclosing
from pathlib import Path
from typing import Annotated, Any
from uuid import uuid4

import anyio
from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session, sessionmaker
from sse_starlette.sse import EventSourceResponse
from starlette.concurrency import run_in_threadpool

from src.api.database import get_db, get_session_factory
from src.api.dependencies.auth import StoreManager
from src.api.schemas import (
    ErrorResponse,
    TrackingResponse,
    UploadErrorDetail,
    UploadSummaryResponse,
    ValidationResponse,
)
from src.api.services.upload_registry import (
    KIND_IMPORT,
    KIND_VALIDATION,
    PendingUpload,
    get_upload_registry,
)
from src.etl.extractors.csv import SourceError
from src.etl.pipeline import AtomicUploadAborted, IngestionRun, check_event_delay
from src.etl.types import RowOutcome, RowSuccess, ValidationSummary
from src.etl.utils.logger import setup_logger
from src.settings import settings

logger = setup_logger("api.routers.movie_upload")

router = APIRouter(prefix="/movies/upload", tags=["Movie upload"])

SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}
INTERNAL_ERROR_MESSAGE = "An unexpected error occurred while processing the upload"


# =============================================================================
# HELPERS
# =============================================================================


def save_upload(file: UploadFile) -> Path:
    """Copy an uploaded file to the uploads directory in chunks.

    Args:
        file: Multipart file sent by the client.

    Returns:
        Path of the saved file, owned by the ingestion run.
    """
    directory = settings.upload.directory
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{uuid4().hex}.csv"
    chunk_size = settings.upload.chunk_size
    with path.open("wb") as out:
        while chunk := file.file.read(chunk_size):
            out.write(chunk)
    logger.debug(f"Saved upload {file.filename} to {path.name}")
    return path


def _validate_delay(delay_ms: int) -> int:
    """Check the validate-only delay.

    Raises:
        HTTPException: 400 if the delay is out of range.
    """
    try:
        return check_event_delay(delay_ms)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from None


def _tracking_response(request: Request, route_name: str, pending: PendingUpload) -> JSONResponse:
    """Build the 202 response pointing to the tracking stream."""
    path = request.app.url_path_for(route_name)
    body = TrackingResponse(
        tracking_url=f"{settings.api.public_url.rstrip('/')}{path}?upload_id={pending.upload_id}",
        upload_id=pending.upload_id,
    )
    return JSONResponse(
        status_code=status.HTTP_202_ACCEPTED,
        content=body.model_dump(by_alias=True),
    )


def _claim(upload_id: str, kind: str, owner: str) -> PendingUpload:
    """Claim a registered upload.

    Raises:
        HTTPException: 404 if the upload is unknown or already claimed.
    """
    pending = get_upload_registry().claim(upload_id, kind, owner)
    if pending is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Upload {upload_id} not found",
        )
    return pending


def _outcome_event(outcome: RowOutcome) -> dict[str, Any]:
    """Frame a row outcome as a processing event."""
    if isinstance(outcome, RowSuccess):
        return {"status": "processing", "outcome": "success", **outcome.to_dict()}
    return {"status": "processing", "outcome": "failed", **outcome.to_dict()}


async def _stream(
    request: Request,
    run: IngestionRun,
    items: Iterator[Any],
    session: Session,
) -> AsyncIterator[Any]:
    """Pull items from a run in the threadpool until exhausted.

    Stops without a terminal event when the client disconnects. The
    run is aborted unless exhausted, and released on exit.
    """
    exhausted = False
    try:
        while True:
            if await request.is_disconnected():
                logger.info(f"Client left, aborting run on {run.file_path.name}")
                return
            item = await run_in_threadpool(next, items, None)
            if item is None:
                exhausted = True
                return
            yield item
    finally:
        if not exhausted:
            run.abort()
        with anyio.CancelScope(shield=True):
            await run_in_threadpool(_release, items, session)


def _release(items: Iterator[Any], session: Session) -> None:
    """Close the run iterator then its session."""
    try:
        close = getattr(items, "close", None)
        if close is not None:
            close()
    finally:
        session.close()


# =============================================================================
# UPLOAD ENDPOINTS
# =============================================================================


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UploadSummaryResponse,
    summary="Upload movies",
    description="Import a CSV file of movies into the catalog.",
    responses={
        202: {"model": TrackingResponse},
        400: {"model": list[UploadErrorDetail]},
        500: {"model": ErrorResponse},
    },
)
def upload_movies(
    request: Request,
    user: StoreManager,
    db: Annotated[Session, Depends(get_db)],
    file: Annotated[UploadFile, File(description="CSV file of movies")],
    enable_tracking: bool = False,
    stop_on_error: bool = False,
) -> Any:
    """Import uploaded movies.

    Args:
        request: Incoming request.
        user: Authenticated store manager.
        db: Database session.
        file: CSV file.
        enable_tracking: Defer the import to the tracking stream.
        stop_on_error: Single transaction, rolled back at the first failure.

    Returns:
        Import summary, or tracking info when tracking is enabled.

    Raises:
        HTTPException: 400 if the CSV file is malformed.
    """
    path = save_upload(file)

    if enable_tracking:
        pending = get_upload_registry().register(
            path,
            KIND_IMPORT,
            user.sub,
            stop_on_error=stop_on_error,
        )
        return _tracking_response(request, "track_upload", pending)

    run = IngestionRun(path, db)
    try:
        summary = run.process_atomic() if stop_on_error else run.process()
    except AtomicUploadAborted as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=[error.to_dict() for error in exc.errors],
        )
    except SourceError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from None
    except Exception as exc:
        logger.exception(f"Upload of {file.filename} failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": str(exc) or INTERNAL_ERROR_MESSAGE},
        )

    logger.info(
        f"{user.sub} uploaded {file.filename}: "
        f"{len(summary.success_rows)} inserted, {len(summary.failed_rows)} failed"
    )
    return UploadSummaryResponse.model_validate(summary.to_dict())


@router.get(
    "/track",
    name="track_upload",
    summary="Track an upload",
    description="Stream the import of a tracked upload as Server-Sent Events.",
)
async def track_upload(
    request: Request,
    user: StoreManager,
    session_factory: Annotated[sessionmaker[Session], Depends(get_session_factory)],
    upload_id: Annotated[str, Query(min_length=1)],
) -> EventSourceResponse:
    """Run a tracked import, one event per row.

    Args:
        request: Incoming request, polled for client disconnect.
        user: Authenticated store manager.
        session_factory: Factory for the stream's own session.
        upload_id: Identifier returned by the upload endpoint.

    Returns:
        EventSourceResponse streaming JSON events.

    Raises:
        HTTPException: 404 if the upload is unknown or already claimed.
    """
    pending = _claim(upload_id, KIND_IMPORT, user.sub)

    async def event_generator() -> AsyncIterator[str]:
        """Generate SSE events from row outcomes."""
        session = session_factory()
        run = IngestionRun(pending.file_path, session)
        outcomes = run.iter_outcomes(stop_on_error=pending.stop_on_error)
        try:
            async with aclosing(_stream(request, run, outcomes, session)) as stream:
                async for outcome in stream:
                    yield json.dumps(_outcome_event(outcome))
            if not run.aborted:
                yield json.dumps({"status": "done", **run.summary.to_dict()})
        except AtomicUploadAborted as exc:
            yield json.dumps(
                {
                    "status": "error",
                    "message": str(exc),
                    "errors": [error.to_dict() for error in exc.errors],
                }
            )
        except SourceError as exc:
            yield json.dumps({"status": "error", "message": str(exc)})
        except Exception:
            logger.exception(f"Tracked upload {pending.upload_id} failed")
            yield json.dumps({"status": "error", "message": INTERNAL_ERROR_MESSAGE})

    return EventSourceResponse(event_generator(), sep="\n", headers=SSE_HEADERS)


# =============================================================================
# VALIDATION ENDPOINTS
# =============================================================================


@router.post(
    "/validate",
    response_model=ValidationResponse,
    summary="Validate movies",
    description="Validate a CSV file of movies without importing it.",
    responses={
        202: {"model": TrackingResponse},
        400: {"model": ErrorResponse},
    },
)
def validate_movies(
    request: Request,
    user: StoreManager,
    db: Annotated[Session, Depends(get_db)],
    file: Annotated[UploadFile, File(description="CSV file of movies")],
    delay_event_ms: int = 0,
    enable_tracking: bool = False,
) -> Any:
    """Validate uploaded movies.

    Args:
        request: Incoming request.
        user: Authenticated store manager.
        db: Database session for duplicate lookups.
        file: CSV file.
        delay_event_ms: Pause before validating each row, here or on
            the tracking stream when tracking is enabled.
        enable_tracking: Defer the validation to the tracking stream.

    Returns:
        Invalid rows, or tracking info when tracking is enabled.

    Raises:
        HTTPException: 400 if the delay is out of range or the CSV
            file is malformed.
    """
    _validate_delay(delay_event_ms)
    path = save_upload(file)

    if enable_tracking:
        pending = get_upload_registry().register(
            path,
            KIND_VALIDATION,
            user.sub,
            delay_ms=delay_event_ms,
        )
        return _tracking_response(request, "track_validation", pending)

    run = IngestionRun(path, db)
    try:
        summary = run.validate_only(delay_event_ms)
    except SourceError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from None

    return ValidationResponse(
        total_rows=summary.total_rows,
        invalid_rows=[
            {"row_number": row.row_number, "reasons": row.reasons} for row in summary.invalid_rows
        ],
    )


@router.get(
    "/track_validation",
    name="track_validation",
    summary="Track a validation",
    description="Stream the validation of a tracked upload as Server-Sent Events.",
)
async def track_validation(
    request: Request,
    user: StoreManager,
    session_factory: Annotated[sessionmaker[Session], Depends(get_session_factory)],
    upload_id: Annotated[str, Query(min_length=1)],
    delay_event_ms: int | None = None,
) -> EventSourceResponse:
    """Run a tracked validation, one event per row.

    Args:
        request: Incoming request, polled for client disconnect.
        user: Authenticated store manager.
        session_factory: Factory for the stream's own session.
        upload_id: Identifier returned by the validate endpoint.
        delay_event_ms: Overrides the delay given at upload.

    Returns:
        EventSourceResponse streaming JSON events.

    Raises:
        HTTPException: 400 if the delay is out of range, 404 if the
            upload is unknown or already claimed.
    """
    if delay_event_ms is not None:
        _validate_delay(delay_event_ms)
    pending = _claim(upload_id, KIND_VALIDATION, user.sub)
    delay_ms = pending.delay_ms if delay_event_ms is None else delay_event_ms

    async def event_generator() -> AsyncIterator[str]:
        """Generate SSE events from row validations."""
        session = session_factory()
        run = IngestionRun(pending.file_path, session)
        results = run.iter_validation(delay_ms)
        summary = ValidationSummary()
        try:
            async with aclosing(_stream(request, run, results, session)) as stream:
                async for result in stream:
                    summary.record(result)
                    yield json.dumps(
                        {
                            "status": "processing",
                            "rowNumber": result.row_number,
                            "isValid": result.is_valid,
                            "reasons": result.reasons,
                        }
                    )
            if not run.aborted:
                yield json.dumps({"status": "done", **summary.counts()})
        except SourceError as exc:
            yield json.dumps({"status": "error", "message": str(exc)})
        except Exception:
            logger.exception(f"Tracked validation {pending.upload_id} failed")
            yield json.dumps({"status": "error", "message": INTERNAL_ERROR_MESSAGE})

    return EventSourceResponse(event_generator(), sep="\n", headers=SSE_HEADERS)
