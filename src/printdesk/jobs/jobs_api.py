"""HTTP routes for print job submission and the staff queue."""

from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile, status
from starlette.concurrency import run_in_threadpool

from ..auth.auth_dependencies import get_current_actor
from ..auth.auth_models import Actor
from ..exceptions import NotFoundError, PrintDeskError
from ..media.object_store import StorageError
from ..slots.slots_errors import AllocationFailed, PoolSaturatedError
from .jobs_errors import (
    Forbidden,
    InvalidTransition,
    UnsupportedFileTypeError,
    ValidationError,
)
from .jobs_models import ColorMode, IncomingFile, JobStatus, PrintPreferences, Sided
from .jobs_schemas import DeleteJobResponse, FailureReason, PrintJobResponse, SweepResponse
from .jobs_service import PrintJobService

router = APIRouter(prefix="/api/print-jobs", tags=["print-jobs"])
logger = logging.getLogger(__name__)

# most specific first: lookup walks this list in order
_ERROR_STATUS: list[tuple[type[PrintDeskError], int, FailureReason]] = [
    (UnsupportedFileTypeError, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, FailureReason.UNSUPPORTED_FILE_TYPE),
    (ValidationError, status.HTTP_400_BAD_REQUEST, FailureReason.INVALID_REQUEST),
    (PoolSaturatedError, status.HTTP_409_CONFLICT, FailureReason.POOL_SATURATED),
    (AllocationFailed, status.HTTP_503_SERVICE_UNAVAILABLE, FailureReason.ALLOCATION_FAILED),
    (InvalidTransition, status.HTTP_409_CONFLICT, FailureReason.INVALID_TRANSITION),
    (Forbidden, status.HTTP_403_FORBIDDEN, FailureReason.FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND, FailureReason.JOB_NOT_FOUND),
    (StorageError, status.HTTP_502_BAD_GATEWAY, FailureReason.STORAGE_ERROR),
]


def get_job_service(request: Request) -> PrintJobService:
    """Fetch print job service from application state."""
    try:
        return request.app.state.job_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover
        raise RuntimeError("PrintJobService is not configured") from exc


def raise_http_error(exc: PrintDeskError) -> NoReturn:
    """Re-raise a domain error as the matching HTTP error body."""
    for error_type, status_code, reason in _ERROR_STATUS:
        if isinstance(exc, error_type):
            detail: dict[str, object] = {
                "status": "error",
                "failure_reason": reason.value,
                "message": str(exc),
            }
            raise HTTPException(status_code=status_code, detail=detail) from exc
    logger.exception("jobs.api.unexpected_error")
    raise HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"status": "error", "failure_reason": FailureReason.INTERNAL_ERROR.value},
    ) from exc


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_print_job(
    files: list[UploadFile] | None = File(None),
    copies: int = Form(1),
    color_mode: ColorMode = Form(ColorMode.BW),
    sided: Sided = Form(Sided.SINGLE),
    stapled: bool = Form(False),
    instructions: str | None = Form(None),
    actor: Actor = Depends(get_current_actor),
    service: PrintJobService = Depends(get_job_service),
) -> PrintJobResponse:
    """Submit documents for printing and return the assigned pickup slot."""
    incoming = [
        IncomingFile(
            file_name=upload.filename or "",
            content_type=upload.content_type,
            data=await upload.read(),
        )
        for upload in files or []
    ]
    preferences = PrintPreferences(
        copies=copies,
        color_mode=color_mode,
        sided=sided,
        stapled=stapled,
        instructions=(instructions or "").strip() or None,
    )
    try:
        job = await run_in_threadpool(service.submit, actor, incoming, preferences)
    except PrintDeskError as exc:
        raise_http_error(exc)
    return PrintJobResponse.from_domain(job)


@router.get("/mine")
def list_own_jobs(
    actor: Actor = Depends(get_current_actor),
    service: PrintJobService = Depends(get_job_service),
) -> list[PrintJobResponse]:
    try:
        jobs = service.list_own(actor)
    except PrintDeskError as exc:
        raise_http_error(exc)
    return [PrintJobResponse.from_domain(job) for job in jobs]


@router.get("/queue")
def list_active_jobs(
    actor: Actor = Depends(get_current_actor),
    service: PrintJobService = Depends(get_job_service),
) -> list[PrintJobResponse]:
    try:
        jobs = service.list_active(actor)
    except PrintDeskError as exc:
        raise_http_error(exc)
    return [PrintJobResponse.from_domain(job) for job in jobs]


@router.get("")
def list_jobs_by_status(
    status_filter: JobStatus = Query(..., alias="status"),
    actor: Actor = Depends(get_current_actor),
    service: PrintJobService = Depends(get_job_service),
) -> list[PrintJobResponse]:
    try:
        jobs = service.list_by_status(actor, status_filter)
    except PrintDeskError as exc:
        raise_http_error(exc)
    return [PrintJobResponse.from_domain(job) for job in jobs]


@router.post("/sweep")
def sweep_retention(
    actor: Actor = Depends(get_current_actor),
    service: PrintJobService = Depends(get_job_service),
) -> SweepResponse:
    try:
        removed = service.sweep(actor)
    except PrintDeskError as exc:
        raise_http_error(exc)
    return SweepResponse(removed=removed)


@router.get("/{job_id}")
def fetch_job(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: PrintJobService = Depends(get_job_service),
) -> PrintJobResponse:
    try:
        job = service.get_job(job_id, actor)
    except PrintDeskError as exc:
        raise_http_error(exc)
    return PrintJobResponse.from_domain(job)


@router.post("/{job_id}/ready")
def mark_ready(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: PrintJobService = Depends(get_job_service),
) -> PrintJobResponse:
    try:
        job = service.mark_ready(job_id, actor)
    except PrintDeskError as exc:
        raise_http_error(exc)
    return PrintJobResponse.from_domain(job)


@router.post("/{job_id}/collected")
def mark_collected(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: PrintJobService = Depends(get_job_service),
) -> PrintJobResponse:
    try:
        job = service.mark_collected(job_id, actor)
    except PrintDeskError as exc:
        raise_http_error(exc)
    return PrintJobResponse.from_domain(job)


@router.delete("/{job_id}")
def delete_job(
    job_id: str,
    actor: Actor = Depends(get_current_actor),
    service: PrintJobService = Depends(get_job_service),
) -> DeleteJobResponse:
    try:
        report = service.delete_job(job_id, actor)
    except PrintDeskError as exc:
        raise_http_error(exc)
    return DeleteJobResponse.from_report(job_id, report)
