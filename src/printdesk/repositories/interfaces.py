"""Repository interfaces for persistence layer implementations."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

from ..jobs.jobs_models import JobStatus, NewPrintJob, PrintJob, SortOrder


@dataclass(frozen=True, slots=True)
class CounterUpdate:
    """Outcome of a committed read-modify-write on a counter row."""

    previous: int | None
    current: int


class CounterStore(Protocol):
    """Single-row counters with a linearizable read-modify-write."""

    def read_modify_write(self, key: str, fn: Callable[[int | None], int]) -> CounterUpdate:
        """Apply ``fn`` to the stored value atomically and persist its result.

        ``fn`` receives ``None`` when the counter does not exist yet. Raises
        :class:`~printdesk.slots.slots_errors.AllocationConflict` when the
        transaction cannot commit.
        """


class JobStore(Protocol):
    """Persistence operations for print jobs."""

    def create_job(self, job: NewPrintJob) -> PrintJob:
        """Persist a new job and return it with its store-assigned id."""

    def get_job(self, job_id: str) -> PrintJob:
        """Return a job or raise :class:`~printdesk.exceptions.NotFoundError`."""

    def update_job_status(self, job_id: str, status: JobStatus) -> PrintJob:
        """Change the status field only."""

    def delete_job(self, job_id: str) -> None:
        """Remove the job record and its attachment rows."""

    def list_jobs(
        self,
        *,
        statuses: Iterable[JobStatus] | None = None,
        submitter_id: str | None = None,
        order: SortOrder = SortOrder.ASC,
    ) -> Sequence[PrintJob]:
        """Return jobs filtered by status set and/or submitter, ordered by ``submitted_at``."""

    def count_jobs(self, statuses: Iterable[JobStatus]) -> int:
        """Count jobs whose status is in ``statuses``."""
