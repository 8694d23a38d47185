"""Dependency wiring helpers."""

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .auth.auth_service import AuthService
from .config import AppConfig
from .health_api import router as health_router
from .jobs.jobs_api import router as jobs_router
from .jobs.jobs_service import PrintJobService
from .jobs.retention_sweeper import RetentionSweeper
from .jobs.validation import SubmissionValidator
from .media.object_store import LocalObjectStore
from .repositories.counter_repository import CounterRepository
from .repositories.print_job_repository import PrintJobRepository
from .slots.capacity_gate import CapacityGate
from .slots.slot_allocator import SlotAllocator
from .slots.slot_board import SlotBoardService
from .slots.slots_api import router as slots_router
from .slots.slots_models import SlotPool


def include_routers(app: FastAPI, config: AppConfig) -> None:
    """Mount module routers and attach services."""
    settings = config.settings
    job_repo = PrintJobRepository(config.session_factory)
    counter_repo = CounterRepository(config.session_factory)
    object_store = LocalObjectStore(
        root=config.storage_root, public_url=settings.public_files_url
    )
    pool = SlotPool(max_slots=settings.max_slots, slots_per_group=settings.slots_per_group)

    allocator = SlotAllocator(
        counters=counter_repo,
        pool=pool,
        max_attempts=settings.allocation_max_attempts,
    )
    gate = CapacityGate(jobs=job_repo, capacity=pool.max_slots)
    sweeper = RetentionSweeper(
        jobs=job_repo,
        store=object_store,
        retention_window=settings.retention_window,
    )
    job_service = PrintJobService(
        jobs=job_repo,
        store=object_store,
        allocator=allocator,
        gate=gate,
        sweeper=sweeper,
        validator=SubmissionValidator(),
    )
    auth_service = AuthService(
        signing_key=settings.jwt_signing_key, algorithm=settings.jwt_algorithm
    )

    app.state.config = config
    app.state.job_repo = job_repo
    app.state.counter_repo = counter_repo
    app.state.object_store = object_store
    app.state.job_service = job_service
    app.state.retention_sweeper = sweeper
    app.state.slot_board_service = SlotBoardService(jobs=job_repo, pool=pool)
    app.state.auth_service = auth_service

    app.include_router(health_router)
    app.include_router(jobs_router)
    app.include_router(slots_router)

    # an absolute public URL means files are served by something in front of us
    if settings.public_files_url.startswith("/"):
        app.mount(
            settings.public_files_url.rstrip("/") or "/files",
            StaticFiles(directory=config.storage_root),
            name="files",
        )
