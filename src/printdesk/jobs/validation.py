"""Submission validation utilities."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from .jobs_errors import UnsupportedFileTypeError, ValidationError
from .jobs_models import IncomingFile, PrintPreferences

logger = logging.getLogger(__name__)

CONTENT_TYPE_KINDS: dict[str, str] = {
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "image/jpeg": "jpeg",
    "image/png": "png",
    "image/gif": "gif",
}

EXTENSION_KINDS: dict[str, str] = {
    ".pdf": "pdf",
    ".doc": "doc",
    ".docx": "docx",
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".png": "png",
    ".gif": "gif",
}

# browsers send these when they cannot tell what the file is
GENERIC_CONTENT_TYPES = frozenset({"", "application/octet-stream", "binary/octet-stream"})

ALLOWED_KINDS = frozenset(CONTENT_TYPE_KINDS.values())


def declared_kind(upload: IncomingFile) -> str | None:
    """Return the document kind declared by content type, else by extension."""
    content_type = (upload.content_type or "").split(";", 1)[0].strip().lower()
    if content_type not in GENERIC_CONTENT_TYPES:
        return CONTENT_TYPE_KINDS.get(content_type)
    return EXTENSION_KINDS.get(PurePosixPath(upload.file_name).suffix.lower())


@dataclass(slots=True)
class SubmissionValidator:
    """Check files and preferences before anything is allocated or stored."""

    allowed_kinds: frozenset[str] = ALLOWED_KINDS
    log: logging.Logger = field(default_factory=lambda: logger)

    def validate(self, files: Sequence[IncomingFile], preferences: PrintPreferences) -> None:
        if not files:
            raise ValidationError("at least one file is required")
        if preferences.copies < 1:
            raise ValidationError("copies must be at least 1")
        for upload in files:
            if not upload.file_name.strip():
                raise ValidationError("every file needs a name")
            kind = declared_kind(upload)
            if kind not in self.allowed_kinds:
                self.log.warning(
                    "jobs.submit.unsupported_file",
                    extra={"file_name": upload.file_name, "content_type": upload.content_type},
                )
                raise UnsupportedFileTypeError(
                    f"'{upload.file_name}' is not a PDF, Word document or image"
                )
