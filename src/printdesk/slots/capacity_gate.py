"""Admission control against the slot pool capacity."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from ..jobs.jobs_models import ACTIVE_STATUSES
from ..repositories.interfaces import JobStore
from .slots_errors import PoolSaturatedError

logger = logging.getLogger(__name__)


class RejectionReason(StrEnum):
    POOL_SATURATED = "PoolSaturated"


@dataclass(frozen=True, slots=True)
class Admission:
    admitted: bool
    active_count: int
    capacity: int
    reason: RejectionReason | None = None


@dataclass(slots=True)
class CapacityGate:
    """Admit new submissions while fewer than ``capacity`` jobs are active.

    The count and the later job insert are separate transactions, so a burst
    of submissions right at the limit can overcommit by a few jobs.
    """

    jobs: JobStore
    capacity: int
    log: logging.Logger = field(default_factory=lambda: logger)

    def check_admission(self) -> Admission:
        active = self.jobs.count_jobs(ACTIVE_STATUSES)
        if active >= self.capacity:
            self.log.warning(
                "slots.admission.rejected",
                extra={"active_count": active, "capacity": self.capacity},
            )
            return Admission(
                admitted=False,
                active_count=active,
                capacity=self.capacity,
                reason=RejectionReason.POOL_SATURATED,
            )
        return Admission(admitted=True, active_count=active, capacity=self.capacity)

    def ensure_admitted(self) -> Admission:
        admission = self.check_admission()
        if not admission.admitted:
            raise PoolSaturatedError(admission.active_count, admission.capacity)
        return admission
