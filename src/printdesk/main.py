"""FastAPI application entry point."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from fastapi import FastAPI

from .config import AppConfig, load_config
from .dependencies import include_routers
from .lifecycle import run_periodic_retention_sweep
from .logging import configure_logging

logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    config: AppConfig = app.state.config
    interval = config.settings.sweep_interval_seconds
    if interval <= 0:
        logger.info("retention.sweep.disabled")
        yield
        return

    shutdown_event = asyncio.Event()
    task = asyncio.create_task(
        run_periodic_retention_sweep(
            sweeper=app.state.retention_sweeper,
            shutdown_event=shutdown_event,
            interval_seconds=interval,
        ),
        name="printdesk-retention-sweep",
    )
    app.state.retention_sweep_task = task
    try:
        yield
    finally:
        shutdown_event.set()
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        app.state.retention_sweep_task = None


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    configure_logging()
    cfg = config or load_config()
    app = FastAPI(title="PrintDesk", lifespan=_lifespan)
    include_routers(app, cfg)
    return app
