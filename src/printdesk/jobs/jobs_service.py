"""Domain service coordinating the print job lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..auth.auth_models import Actor
from ..exceptions import RepositoryError
from ..media.media_cleanup import FileRemovalReport, remove_job_files
from ..media.object_store import ObjectExistsError, ObjectStore, StorageError, build_storage_path
from ..repositories.interfaces import JobStore
from ..slots.capacity_gate import CapacityGate
from ..slots.slot_allocator import SlotAllocator
from .job_policy import Operation, can_perform, transition_for
from .jobs_errors import Forbidden, JobPersistenceError
from .jobs_models import (
    ACTIVE_STATUSES,
    IncomingFile,
    JobFile,
    JobStatus,
    NewPrintJob,
    PrintJob,
    PrintPreferences,
    SortOrder,
    Submitter,
)
from .retention_sweeper import RetentionSweeper
from .validation import SubmissionValidator

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class PrintJobService:
    """Submit, advance, list and delete print jobs on behalf of an actor."""

    jobs: JobStore
    store: ObjectStore
    allocator: SlotAllocator
    gate: CapacityGate
    sweeper: RetentionSweeper
    validator: SubmissionValidator = field(default_factory=SubmissionValidator)
    clock: Callable[[], datetime] = _utcnow
    log: logging.Logger = field(default_factory=lambda: logger)

    def submit(
        self,
        actor: Actor,
        files: Sequence[IncomingFile],
        preferences: PrintPreferences,
    ) -> PrintJob:
        """Admit, allocate a slot, store the documents and create the job record.

        Nothing is stored when admission or allocation fails; a failed upload
        aborts the submission before any record exists.
        """
        self._require(actor, Operation.SUBMIT)
        self.validator.validate(files, preferences)
        admission = self.gate.ensure_admitted()
        slot_id = self.allocator.assign()

        submitted_at = self.clock()
        stored = self._store_files(slot_id, files, submitted_at)

        new_job = NewPrintJob(
            submitter=Submitter(id=actor.id, email=actor.email, role=actor.role),
            files=stored,
            preferences=preferences,
            slot_id=slot_id,
            submitted_at=submitted_at,
        )
        try:
            job = self.jobs.create_job(new_job)
        except RepositoryError as exc:
            self.log.critical(
                "jobs.submit.orphaned_blobs",
                extra={
                    "slot_id": slot_id,
                    "submitter_id": actor.id,
                    "paths": [item.storage_path for item in stored],
                    "error": str(exc),
                },
            )
            self._discard_blobs([item.storage_path for item in stored], slot_id=slot_id)
            raise JobPersistenceError("job record could not be created after upload") from exc

        self.log.info(
            "jobs.submit.accepted",
            extra={
                "job_id": job.id,
                "slot_id": job.slot_id,
                "submitter_id": actor.id,
                "files": len(job.files),
                "active_before": admission.active_count,
            },
        )
        return job

    def get_job(self, job_id: str, actor: Actor) -> PrintJob:
        job = self.jobs.get_job(job_id)
        self._require(actor, Operation.VIEW, job)
        return job

    def advance(self, job_id: str, actor: Actor, target_status: JobStatus) -> PrintJob:
        """Move a job one step forward; only the status field changes."""
        job = self.jobs.get_job(job_id)
        # outsiders are refused before the current status is revealed
        self._require(actor, Operation.VIEW, job)
        operation = transition_for(job.status, target_status)
        self._require(actor, operation, job)
        updated = self.jobs.update_job_status(job.id, target_status)
        self.log.info(
            "jobs.status.changed",
            extra={
                "job_id": job.id,
                "slot_id": job.slot_id,
                "from_status": job.status.value,
                "to_status": target_status.value,
                "actor_id": actor.id,
            },
        )
        return updated

    def mark_ready(self, job_id: str, actor: Actor) -> PrintJob:
        return self.advance(job_id, actor, JobStatus.READY)

    def mark_collected(self, job_id: str, actor: Actor) -> PrintJob:
        return self.advance(job_id, actor, JobStatus.COLLECTED)

    def delete_job(self, job_id: str, actor: Actor) -> FileRemovalReport:
        """Remove every attached file (best effort) and then the job record."""
        self._require(actor, Operation.DELETE)
        job = self.jobs.get_job(job_id)
        report = remove_job_files(self.store, job, log=self.log)
        self.jobs.delete_job(job.id)
        self.log.info(
            "jobs.delete.done",
            extra={
                "job_id": job.id,
                "slot_id": job.slot_id,
                "actor_id": actor.id,
                "files_removed": len(report.removed),
                "files_failed": len(report.failed),
            },
        )
        return report

    def list_active(self, actor: Actor) -> Sequence[PrintJob]:
        """Staff queue: InProgress and Ready jobs, oldest first."""
        return self._list_queue(actor, ACTIVE_STATUSES)

    def list_by_status(self, actor: Actor, status: JobStatus) -> Sequence[PrintJob]:
        return self._list_queue(actor, [status])

    def list_own(self, actor: Actor) -> Sequence[PrintJob]:
        self._require(actor, Operation.LIST_OWN)
        return self.jobs.list_jobs(submitter_id=actor.id, order=SortOrder.DESC)

    def sweep(self, actor: Actor, now: datetime | None = None) -> int:
        self._require(actor, Operation.SWEEP)
        return self.sweeper.sweep(now or self.clock())

    def _list_queue(self, actor: Actor, statuses: Iterable[JobStatus]) -> Sequence[PrintJob]:
        self._require(actor, Operation.LIST_QUEUE)
        try:
            self.sweeper.sweep(self.clock())
        except RepositoryError:
            # the queue is still served; the next fetch or the timer retries the sweep
            self.log.exception("retention.sweep.prefetch_failed")
        return self.jobs.list_jobs(statuses=statuses, order=SortOrder.ASC)

    def _store_files(
        self,
        slot_id: str,
        files: Sequence[IncomingFile],
        submitted_at: datetime,
    ) -> list[JobFile]:
        stamp = int(submitted_at.timestamp() * 1000)
        stored: list[JobFile] = []
        for upload in files:
            path = build_storage_path(upload.file_name, timestamp_ms=stamp)
            try:
                path, url = self._put_unique(upload, stamp)
            except StorageError:
                self.log.error(
                    "jobs.submit.upload_failed",
                    extra={"slot_id": slot_id, "path": path, "stored_before": len(stored)},
                )
                self._discard_blobs([item.storage_path for item in stored], slot_id=slot_id)
                raise
            stored.append(
                JobFile(
                    file_name=upload.file_name,
                    file_url=url,
                    storage_path=path,
                    content_type=upload.content_type,
                    size_bytes=len(upload.data),
                )
            )
        return stored

    def _put_unique(self, upload: IncomingFile, stamp: int) -> tuple[str, str]:
        """Store ``upload`` at the first free ``<stamp>_<name>`` path, bumping the stamp."""
        while True:
            path = build_storage_path(upload.file_name, timestamp_ms=stamp)
            try:
                return path, self.store.put(path, upload.data, content_type=upload.content_type)
            except ObjectExistsError:
                # same name earlier in this submission or in another one within the millisecond
                stamp += 1

    def _discard_blobs(self, paths: Iterable[str], *, slot_id: str) -> None:
        for path in paths:
            try:
                self.store.delete(path)
            except StorageError as exc:
                self.log.warning(
                    "jobs.submit.discard_failed",
                    extra={"slot_id": slot_id, "path": path, "error": str(exc)},
                )

    @staticmethod
    def _require(actor: Actor, operation: Operation, job: PrintJob | None = None) -> None:
        if not can_perform(actor, operation, job):
            raise Forbidden(f"{actor.role} '{actor.id}' may not {operation.value}")
