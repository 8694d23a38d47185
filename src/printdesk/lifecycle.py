"""Lifecycle helpers wiring background tasks for FastAPI startup."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable

from .exceptions import PrintDeskError
from .jobs.retention_sweeper import RetentionSweeper

logger = logging.getLogger(__name__)


def _default_clock() -> datetime:
    return datetime.now(timezone.utc)


def retention_sweep_once(
    *,
    sweeper: RetentionSweeper,
    now: datetime | None = None,
) -> int:
    """Run a single retention sweep and return the number of removed jobs."""

    return sweeper.sweep(now or _default_clock())


async def run_periodic_retention_sweep(
    *,
    sweeper: RetentionSweeper,
    shutdown_event: asyncio.Event,
    interval_seconds: float = 900.0,
    clock: Callable[[], datetime] | None = None,
) -> None:
    """Sweep expired Collected jobs until ``shutdown_event`` is signalled."""

    interval = max(1.0, float(interval_seconds))
    tick = clock or _default_clock
    while not shutdown_event.is_set():
        try:
            removed = await asyncio.to_thread(
                retention_sweep_once, sweeper=sweeper, now=tick()
            )
        except PrintDeskError:
            logger.exception("retention.sweep.iteration_failed")
        else:
            if removed:
                logger.info("retention.sweep.periodic", extra={"removed": removed})
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            continue


__all__ = [
    "retention_sweep_once",
    "run_periodic_retention_sweep",
]
