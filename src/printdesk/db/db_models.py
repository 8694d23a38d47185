"""SQLAlchemy ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base declarative class."""


class CounterModel(Base):
    """Single-row counters updated through compare-and-swap on ``version``."""

    __tablename__ = "counter"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class PrintJobModel(Base):
    __tablename__ = "print_job"
    __table_args__ = (
        Index("ix_print_job_status_submitted_at", "status", "submitted_at"),
        Index("ix_print_job_submitter_submitted_at", "submitter_id", "submitted_at"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    submitter_id: Mapped[str] = mapped_column(String(128), nullable=False)
    submitter_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    submitter_role: Mapped[str] = mapped_column(String(16), nullable=False)
    slot_id: Mapped[str] = mapped_column(String(8), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    color_mode: Mapped[str] = mapped_column(String(8), nullable=False)
    sided: Mapped[str] = mapped_column(String(8), nullable=False)
    stapled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    instructions: Mapped[str | None] = mapped_column(Text)
    submitted_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    files: Mapped[list["PrintJobFileModel"]] = relationship(
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="PrintJobFileModel.position",
    )


class PrintJobFileModel(Base):
    __tablename__ = "print_job_file"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    job_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("print_job.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(512), nullable=False)
    content_type: Mapped[str | None] = mapped_column(String(128))
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    job: Mapped[PrintJobModel] = relationship(back_populates="files")
