"""Print job entity, preferences and related value types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from ..auth.auth_models import Role


class JobStatus(StrEnum):
    """Lifecycle statuses of a print job."""

    IN_PROGRESS = "InProgress"
    READY = "Ready"
    COLLECTED = "Collected"


ACTIVE_STATUSES = frozenset({JobStatus.IN_PROGRESS, JobStatus.READY})


class ColorMode(StrEnum):
    BW = "BW"
    COLOR = "Color"


class Sided(StrEnum):
    SINGLE = "Single"
    DOUBLE = "Double"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class PrintPreferences:
    copies: int = 1
    color_mode: ColorMode = ColorMode.BW
    sided: Sided = Sided.SINGLE
    stapled: bool = False
    instructions: str | None = None


@dataclass(frozen=True, slots=True)
class Submitter:
    id: str
    email: str
    role: Role


@dataclass(slots=True)
class IncomingFile:
    """Document received from a submitter, before it reaches the object store."""

    file_name: str
    content_type: str | None
    data: bytes


@dataclass(frozen=True, slots=True)
class JobFile:
    file_name: str
    file_url: str
    storage_path: str
    content_type: str | None = None
    size_bytes: int = 0


@dataclass(slots=True)
class NewPrintJob:
    """Values needed to create a job record; the store assigns the id."""

    submitter: Submitter
    files: list[JobFile]
    preferences: PrintPreferences
    slot_id: str
    submitted_at: datetime
    status: JobStatus = JobStatus.IN_PROGRESS


@dataclass(slots=True)
class PrintJob:
    id: str
    submitter: Submitter
    slot_id: str
    status: JobStatus
    submitted_at: datetime
    preferences: PrintPreferences = field(default_factory=PrintPreferences)
    files: list[JobFile] = field(default_factory=list)
