"""Removal of the blobs attached to a print job."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..jobs.jobs_models import PrintJob
from .object_store import ObjectStore, StorageError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FileRemovalReport:
    removed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed


def remove_job_files(
    store: ObjectStore,
    job: PrintJob,
    *,
    log: logging.Logger | None = None,
) -> FileRemovalReport:
    """Delete every attachment of ``job``; a failed file is logged and skipped."""
    log = log or logger
    report = FileRemovalReport()
    for item in job.files:
        try:
            store.delete(item.storage_path)
        except StorageError as exc:
            report.failed.append(item.storage_path)
            log.warning(
                "media.cleanup.file_failed",
                extra={
                    "job_id": job.id,
                    "slot_id": job.slot_id,
                    "path": item.storage_path,
                    "error": str(exc),
                },
            )
            continue
        report.removed.append(item.storage_path)
    return report
