"""Errors raised by slot allocation and admission control."""

from ..exceptions import PrintDeskError


class SlotError(PrintDeskError):
    """Base class for slot pool errors."""


class PoolSaturatedError(SlotError):
    """Raised when every pickup slot is held by an active job."""

    def __init__(self, active_count: int, capacity: int) -> None:
        super().__init__(f"All {capacity} slots are currently active ({active_count} active jobs)")
        self.active_count = active_count
        self.capacity = capacity


class AllocationConflict(SlotError):
    """Raised when one slot counter transaction could not commit."""


class AllocationFailed(SlotError):
    """Raised when the slot counter could not be advanced after retries."""
