"""Pydantic payloads for print job routes."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from ..auth.auth_models import Role
from ..media.media_cleanup import FileRemovalReport
from .jobs_models import ColorMode, JobStatus, PrintJob, Sided


class FailureReason(StrEnum):
    """Failure reasons returned in error bodies."""

    INVALID_REQUEST = "invalid_request"
    UNSUPPORTED_FILE_TYPE = "unsupported_file_type"
    POOL_SATURATED = "pool_saturated"
    ALLOCATION_FAILED = "allocation_failed"
    INVALID_TRANSITION = "invalid_transition"
    FORBIDDEN = "forbidden"
    JOB_NOT_FOUND = "job_not_found"
    STORAGE_ERROR = "storage_error"
    INTERNAL_ERROR = "internal_error"


class SubmitterPayload(BaseModel):
    id: str
    email: str
    role: Role


class PreferencesPayload(BaseModel):
    copies: int = Field(ge=1)
    color_mode: ColorMode
    sided: Sided
    stapled: bool
    instructions: str | None = None


class JobFilePayload(BaseModel):
    file_name: str
    file_url: str
    content_type: str | None = None
    size_bytes: int = 0


class PrintJobResponse(BaseModel):
    job_id: str
    slot_id: str
    status: JobStatus
    submitted_at: datetime
    submitter: SubmitterPayload
    preferences: PreferencesPayload
    files: list[JobFilePayload]

    @classmethod
    def from_domain(cls, job: PrintJob) -> "PrintJobResponse":
        return cls(
            job_id=job.id,
            slot_id=job.slot_id,
            status=job.status,
            submitted_at=job.submitted_at,
            submitter=SubmitterPayload(
                id=job.submitter.id, email=job.submitter.email, role=job.submitter.role
            ),
            preferences=PreferencesPayload(
                copies=job.preferences.copies,
                color_mode=job.preferences.color_mode,
                sided=job.preferences.sided,
                stapled=job.preferences.stapled,
                instructions=job.preferences.instructions,
            ),
            files=[
                JobFilePayload(
                    file_name=item.file_name,
                    file_url=item.file_url,
                    content_type=item.content_type,
                    size_bytes=item.size_bytes,
                )
                for item in job.files
            ],
        )


class DeleteJobResponse(BaseModel):
    job_id: str
    files_removed: int
    files_failed: list[str]

    @classmethod
    def from_report(cls, job_id: str, report: FileRemovalReport) -> "DeleteJobResponse":
        return cls(job_id=job_id, files_removed=len(report.removed), files_failed=report.failed)


class SweepResponse(BaseModel):
    removed: int
