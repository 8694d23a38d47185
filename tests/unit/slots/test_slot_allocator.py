from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from sqlalchemy.orm import sessionmaker

from printdesk.config import build_engine
from printdesk.db.db_init import init_db
from printdesk.repositories.counter_repository import CounterRepository
from printdesk.repositories.interfaces import CounterUpdate
from printdesk.slots.slot_allocator import SLOT_COUNTER_KEY, SlotAllocator
from printdesk.slots.slots_errors import AllocationConflict, AllocationFailed
from printdesk.slots.slots_models import SlotPool


class InMemoryCounters:
    """Counter store that can be told to lose the next few transactions."""

    def __init__(self, *, conflicts: int = 0, value: int | None = None) -> None:
        self.values: dict[str, int] = {}
        if value is not None:
            self.values[SLOT_COUNTER_KEY] = value
        self.conflicts = conflicts
        self.calls = 0

    def read_modify_write(self, key: str, fn: Callable[[int | None], int]) -> CounterUpdate:
        self.calls += 1
        if self.conflicts:
            self.conflicts -= 1
            raise AllocationConflict("lost the race")
        previous = self.values.get(key)
        current = fn(previous)
        self.values[key] = current
        return CounterUpdate(previous=previous, current=current)


def test_first_assignment_starts_at_a01() -> None:
    counters = InMemoryCounters()
    allocator = SlotAllocator(counters=counters)

    assert allocator.assign() == "A-01"
    assert counters.values[SLOT_COUNTER_KEY] == 1


def test_assignments_cycle_through_the_pool() -> None:
    allocator = SlotAllocator(counters=InMemoryCounters())

    assigned = [allocator.assign() for _ in range(51)]

    assert assigned[0] == "A-01"
    assert assigned[10] == "B-01"
    assert assigned[49] == "E-10"
    assert assigned[50] == "A-01"
    assert len(set(assigned[:50])) == 50


def test_cursor_at_last_index_wraps() -> None:
    counters = InMemoryCounters(value=49)
    allocator = SlotAllocator(counters=counters)

    assert allocator.assign() == "E-10"
    assert counters.values[SLOT_COUNTER_KEY] == 0
    assert allocator.assign() == "A-01"


def test_out_of_range_cursor_is_folded_into_pool() -> None:
    counters = InMemoryCounters(value=53)
    allocator = SlotAllocator(counters=counters, pool=SlotPool(max_slots=50))

    assert allocator.assign() == "A-04"
    assert counters.values[SLOT_COUNTER_KEY] == 4


def test_conflicts_are_retried_after_backoff() -> None:
    counters = InMemoryCounters(conflicts=2)
    delays: list[float] = []
    allocator = SlotAllocator(counters=counters, max_attempts=5, sleep=delays.append)

    assert allocator.assign() == "A-01"
    assert counters.calls == 3
    assert len(delays) == 2
    assert 0 <= delays[0] <= allocator.backoff_seconds
    assert 0 <= delays[1] <= allocator.backoff_seconds * 2


def test_gives_up_after_max_attempts() -> None:
    counters = InMemoryCounters(conflicts=10)
    delays: list[float] = []
    allocator = SlotAllocator(counters=counters, max_attempts=3, sleep=delays.append)

    with pytest.raises(AllocationFailed):
        allocator.assign()
    assert counters.calls == 3
    assert len(delays) == 2
    assert SLOT_COUNTER_KEY not in counters.values


@pytest.mark.parametrize("workers", [8, 40])
def test_concurrent_assignments_are_distinct(tmp_path: Path, workers: int) -> None:
    engine = build_engine(f"sqlite:///{tmp_path / 'counter.db'}")
    init_db(engine)
    repo = CounterRepository(sessionmaker(bind=engine, expire_on_commit=False))
    allocator = SlotAllocator(counters=repo)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        assigned = list(pool.map(lambda _: allocator.assign(), range(40)))

    expected = {SlotPool().format(index) for index in range(40)}
    assert sorted(assigned) == sorted(expected)
    assert repo.read(SLOT_COUNTER_KEY) == 40
    engine.dispose()
