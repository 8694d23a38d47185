"""Occupancy view of the pickup shelves."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..auth.auth_models import Actor
from ..jobs.job_policy import Operation, can_perform
from ..jobs.jobs_errors import Forbidden
from ..jobs.jobs_models import ACTIVE_STATUSES, JobStatus, SortOrder
from ..repositories.interfaces import JobStore
from .slots_models import SlotBoard, SlotOccupancy, SlotPool, SlotState

logger = logging.getLogger(__name__)

_STATE_BY_STATUS = {
    JobStatus.IN_PROGRESS: SlotState.IN_PROGRESS,
    JobStatus.READY: SlotState.READY,
}


@dataclass(slots=True)
class SlotBoardService:
    """Map every slot of the pool to the active job holding it, if any."""

    jobs: JobStore
    pool: SlotPool = field(default_factory=SlotPool)
    log: logging.Logger = field(default_factory=lambda: logger)

    def build_board(self, actor: Actor) -> SlotBoard:
        if not can_perform(actor, Operation.VIEW_SLOTS):
            raise Forbidden(f"{actor.role} '{actor.id}' may not view slots")

        board = {slot_id: SlotOccupancy(slot_id=slot_id) for slot_id in self.pool.slot_ids()}
        for job in self.jobs.list_jobs(statuses=ACTIVE_STATUSES, order=SortOrder.ASC):
            entry = board.get(job.slot_id)
            if entry is None:
                self.log.warning(
                    "slots.board.unknown_slot", extra={"job_id": job.id, "slot_id": job.slot_id}
                )
                continue
            if entry.job_id is not None:
                # overcommitted pool: two active jobs share the label, newest shown
                self.log.warning(
                    "slots.board.shared_slot",
                    extra={"slot_id": job.slot_id, "job_ids": [entry.job_id, job.id]},
                )
            entry.state = _STATE_BY_STATUS[job.status]
            entry.job_id = job.id
            entry.submitter_email = job.submitter.email
            entry.submitted_at = job.submitted_at
        return SlotBoard(slots=list(board.values()))
