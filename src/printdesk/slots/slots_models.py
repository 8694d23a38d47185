"""Slot pool geometry and occupancy snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

MAX_SLOTS = 50
SLOTS_PER_GROUP = 10
_GROUP_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def format_slot_id(index: int, *, slots_per_group: int = SLOTS_PER_GROUP) -> str:
    """Render a zero-based slot index as ``<group letter>-<NN>`` (0 -> ``A-01``)."""
    if index < 0:
        raise ValueError(f"slot index must be non-negative, got {index}")
    group, number = divmod(index, slots_per_group)
    if group >= len(_GROUP_LETTERS):
        raise ValueError(f"slot index {index} exceeds available group letters")
    return f"{_GROUP_LETTERS[group]}-{number + 1:02d}"


@dataclass(frozen=True, slots=True)
class SlotPool:
    """Bounded space of slot indexes ``0..max_slots-1`` and their labels."""

    max_slots: int = MAX_SLOTS
    slots_per_group: int = SLOTS_PER_GROUP

    def __post_init__(self) -> None:
        if self.max_slots <= 0 or self.slots_per_group <= 0:
            raise ValueError("slot pool dimensions must be positive")
        if self.group_count > len(_GROUP_LETTERS):
            raise ValueError(
                f"{self.max_slots} slots in groups of {self.slots_per_group} "
                f"need {self.group_count} group letters, only {len(_GROUP_LETTERS)} exist"
            )

    @property
    def group_count(self) -> int:
        return -(-self.max_slots // self.slots_per_group)

    def format(self, index: int) -> str:
        if not 0 <= index < self.max_slots:
            raise ValueError(f"slot index {index} outside pool of {self.max_slots}")
        return format_slot_id(index, slots_per_group=self.slots_per_group)

    def next_index(self, index: int) -> int:
        return (index + 1) % self.max_slots

    def slot_ids(self) -> list[str]:
        return [self.format(index) for index in range(self.max_slots)]


class SlotState(StrEnum):
    EMPTY = "Empty"
    IN_PROGRESS = "InProgress"
    READY = "Ready"


@dataclass(slots=True)
class SlotOccupancy:
    slot_id: str
    state: SlotState = SlotState.EMPTY
    job_id: str | None = None
    submitter_email: str | None = None
    submitted_at: datetime | None = None


@dataclass(slots=True)
class SlotBoard:
    """Occupancy of every slot in the pool."""

    slots: list[SlotOccupancy] = field(default_factory=list)

    @property
    def active_count(self) -> int:
        return sum(1 for slot in self.slots if slot.state is not SlotState.EMPTY)

    @property
    def empty_count(self) -> int:
        return len(self.slots) - self.active_count
