"""Persistence layer for print jobs."""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ..auth.auth_models import Role
from ..db.db_models import PrintJobFileModel, PrintJobModel
from ..exceptions import ensure_found, handle_sqlalchemy_errors
from ..jobs.jobs_models import (
    ColorMode,
    JobFile,
    JobStatus,
    NewPrintJob,
    PrintJob,
    PrintPreferences,
    Sided,
    SortOrder,
    Submitter,
)


def _to_storage_time(value: datetime) -> datetime:
    """Store naive UTC; SQLite drops offsets anyway."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _from_storage_time(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PrintJobRepository:
    """Manage print_job records and their attachment rows."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def create_job(self, job: NewPrintJob) -> PrintJob:
        job_id = uuid.uuid4().hex
        model = PrintJobModel(
            id=job_id,
            submitter_id=job.submitter.id,
            submitter_email=job.submitter.email,
            submitter_role=job.submitter.role.value,
            slot_id=job.slot_id,
            status=job.status.value,
            copies=job.preferences.copies,
            color_mode=job.preferences.color_mode.value,
            sided=job.preferences.sided.value,
            stapled=job.preferences.stapled,
            instructions=job.preferences.instructions,
            submitted_at=_to_storage_time(job.submitted_at),
            files=[
                PrintJobFileModel(
                    position=position,
                    file_name=item.file_name,
                    file_url=item.file_url,
                    storage_path=item.storage_path,
                    content_type=item.content_type,
                    size_bytes=item.size_bytes,
                )
                for position, item in enumerate(job.files)
            ],
        )
        with handle_sqlalchemy_errors(entity="print_job"), self._session_factory() as session:
            session.add(model)
            session.commit()
            return self._to_domain(model)

    def get_job(self, job_id: str) -> PrintJob:
        with handle_sqlalchemy_errors(entity="print_job"), self._session_factory() as session:
            model = ensure_found(
                self._load(session, job_id), entity="print job", identifier=job_id
            )
            return self._to_domain(model)

    def update_job_status(self, job_id: str, status: JobStatus) -> PrintJob:
        with handle_sqlalchemy_errors(entity="print_job"), self._session_factory() as session:
            model = ensure_found(
                self._load(session, job_id), entity="print job", identifier=job_id
            )
            model.status = status.value
            session.commit()
            return self._to_domain(model)

    def delete_job(self, job_id: str) -> None:
        with handle_sqlalchemy_errors(entity="print_job"), self._session_factory() as session:
            model = ensure_found(
                self._load(session, job_id), entity="print job", identifier=job_id
            )
            session.delete(model)
            session.commit()

    def list_jobs(
        self,
        *,
        statuses: Iterable[JobStatus] | None = None,
        submitter_id: str | None = None,
        order: SortOrder = SortOrder.ASC,
    ) -> Sequence[PrintJob]:
        query = select(PrintJobModel).options(selectinload(PrintJobModel.files))
        if statuses is not None:
            query = query.where(PrintJobModel.status.in_([status.value for status in statuses]))
        if submitter_id is not None:
            query = query.where(PrintJobModel.submitter_id == submitter_id)
        ordering = PrintJobModel.submitted_at
        query = query.order_by(ordering.desc() if order is SortOrder.DESC else ordering.asc())
        with handle_sqlalchemy_errors(entity="print_job"), self._session_factory() as session:
            rows = session.scalars(query).all()
            return [self._to_domain(row) for row in rows]

    def count_jobs(self, statuses: Iterable[JobStatus]) -> int:
        query = (
            select(func.count())
            .select_from(PrintJobModel)
            .where(PrintJobModel.status.in_([status.value for status in statuses]))
        )
        with handle_sqlalchemy_errors(entity="print_job"), self._session_factory() as session:
            return int(session.scalar(query) or 0)

    @staticmethod
    def _load(session: Session, job_id: str) -> PrintJobModel | None:
        return session.get(
            PrintJobModel, job_id, options=[selectinload(PrintJobModel.files)]
        )

    @staticmethod
    def _to_domain(model: PrintJobModel) -> PrintJob:
        return PrintJob(
            id=model.id,
            submitter=Submitter(
                id=model.submitter_id,
                email=model.submitter_email,
                role=Role(model.submitter_role),
            ),
            slot_id=model.slot_id,
            status=JobStatus(model.status),
            submitted_at=_from_storage_time(model.submitted_at),
            preferences=PrintPreferences(
                copies=model.copies,
                color_mode=ColorMode(model.color_mode),
                sided=Sided(model.sided),
                stapled=model.stapled,
                instructions=model.instructions,
            ),
            files=[
                JobFile(
                    file_name=item.file_name,
                    file_url=item.file_url,
                    storage_path=item.storage_path,
                    content_type=item.content_type,
                    size_bytes=item.size_bytes,
                )
                for item in model.files
            ],
        )
