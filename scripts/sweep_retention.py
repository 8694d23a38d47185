"""Cron entry point for sweeping collected print jobs past retention."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from datetime import datetime, timezone

from printdesk.config import load_config
from printdesk.jobs.retention_sweeper import RetentionSweeper
from printdesk.logging import configure_logging
from printdesk.media.object_store import LocalObjectStore
from printdesk.repositories.print_job_repository import PrintJobRepository


@dataclass(slots=True)
class SweepSummary:
    jobs_removed: int
    dry_run: bool


def perform_sweep(*, dry_run: bool, reference_time: datetime | None = None) -> SweepSummary:
    """Execute the retention sweep and return summary counters."""
    config = load_config()
    job_repo = PrintJobRepository(config.session_factory)
    object_store = LocalObjectStore(
        root=config.storage_root, public_url=config.settings.public_files_url
    )
    sweeper = RetentionSweeper(
        jobs=job_repo,
        store=object_store,
        retention_window=config.settings.retention_window,
    )

    now = reference_time or datetime.now(timezone.utc)

    if dry_run:
        return SweepSummary(jobs_removed=len(sweeper.expired_jobs(now)), dry_run=True)

    return SweepSummary(jobs_removed=sweeper.sweep(now), dry_run=False)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Remove collected print jobs past retention.")
    parser.add_argument("--dry-run", action="store_true", help="Only report counts without deleting jobs.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or [])
    configure_logging()
    try:
        summary = perform_sweep(dry_run=args.dry_run)
    except Exception as exc:
        print(f"sweep failed: {exc}", file=sys.stderr)
        return 2

    if summary.dry_run:
        print(f"sweep dry-run, jobs_expired={summary.jobs_removed}", file=sys.stdout)
    else:
        print(f"sweep done, jobs_removed={summary.jobs_removed}", file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
