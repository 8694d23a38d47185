"""Retention-driven removal of collected print jobs."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from ..exceptions import PrintDeskError
from ..media.media_cleanup import remove_job_files
from ..media.object_store import ObjectStore
from ..repositories.interfaces import JobStore
from .jobs_models import JobStatus, PrintJob, SortOrder

logger = logging.getLogger(__name__)

RETENTION_WINDOW = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(slots=True)
class RetentionSweeper:
    """Delete Collected jobs (files first, then the record) once past retention."""

    jobs: JobStore
    store: ObjectStore
    retention_window: timedelta = RETENTION_WINDOW
    log: logging.Logger = field(default_factory=lambda: logger)

    def expired_jobs(self, now: datetime | None = None) -> Sequence[PrintJob]:
        current = _as_utc(now or _utcnow())
        collected = self.jobs.list_jobs(statuses=[JobStatus.COLLECTED], order=SortOrder.ASC)
        return [job for job in collected if current - job.submitted_at > self.retention_window]

    def sweep(self, now: datetime | None = None) -> int:
        """Remove expired Collected jobs and return how many were deleted."""
        removed = 0
        for job in self.expired_jobs(now):
            try:
                report = remove_job_files(self.store, job, log=self.log)
                self.jobs.delete_job(job.id)
            except PrintDeskError:
                self.log.exception(
                    "retention.sweep.job_failed",
                    extra={"job_id": job.id, "slot_id": job.slot_id},
                )
                continue
            removed += 1
            self.log.info(
                "retention.sweep.removed",
                extra={
                    "job_id": job.id,
                    "slot_id": job.slot_id,
                    "files_removed": len(report.removed),
                    "files_failed": len(report.failed),
                },
            )
        if removed:
            self.log.info("retention.sweep.done", extra={"removed": removed})
        return removed
