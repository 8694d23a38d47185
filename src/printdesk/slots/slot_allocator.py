"""Atomic assignment of the next pickup slot."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ..repositories.interfaces import CounterStore
from .slots_errors import AllocationConflict, AllocationFailed
from .slots_models import SlotPool

logger = logging.getLogger(__name__)

SLOT_COUNTER_KEY = "print_slots"


@dataclass(slots=True)
class SlotAllocator:
    """Hand out slot ids by advancing the shared cursor modulo the pool size.

    The cursor lives only in the counter store; this class keeps no copy of it.
    Lost transactions are retried after a jittered exponential backoff.
    """

    counters: CounterStore
    pool: SlotPool = field(default_factory=SlotPool)
    max_attempts: int = 5
    backoff_seconds: float = 0.02
    counter_key: str = SLOT_COUNTER_KEY
    sleep: Callable[[float], None] = time.sleep
    log: logging.Logger = field(default_factory=lambda: logger)

    def assign(self) -> str:
        """Return the slot id at the cursor and advance it in the same transaction."""
        for attempt in range(1, self.max_attempts + 1):
            try:
                update = self.counters.read_modify_write(self.counter_key, self._advance)
            except AllocationConflict as exc:
                self.log.warning(
                    "slots.allocate.conflict",
                    extra={"attempt": attempt, "max_attempts": self.max_attempts, "error": str(exc)},
                )
                if attempt < self.max_attempts:
                    self.sleep(self._backoff(attempt))
                continue
            index = self._normalize(update.previous)
            slot_id = self.pool.format(index)
            self.log.info(
                "slots.allocate.assigned",
                extra={"slot_id": slot_id, "slot_index": index, "attempt": attempt},
            )
            return slot_id

        self.log.error(
            "slots.allocate.failed", extra={"max_attempts": self.max_attempts}
        )
        raise AllocationFailed(
            f"slot counter could not be updated after {self.max_attempts} attempts"
        )

    def _backoff(self, attempt: int) -> float:
        return random.uniform(0, self.backoff_seconds * 2 ** (attempt - 1))

    def _advance(self, current: int | None) -> int:
        return self.pool.next_index(self._normalize(current))

    def _normalize(self, value: int | None) -> int:
        # a pool shrunk by configuration may leave the stored cursor out of range
        return (value or 0) % self.pool.max_slots
