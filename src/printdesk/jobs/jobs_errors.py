"""Domain-specific exceptions for the print job lifecycle."""

from ..exceptions import PrintDeskError


class JobError(PrintDeskError):
    """Base class for print job errors."""


class ValidationError(JobError):
    """Raised when a submission is malformed (no files, zero copies, ...)."""


class UnsupportedFileTypeError(ValidationError):
    """Raised when a document type is not accepted for printing."""


class InvalidTransition(JobError):
    """Raised when a status change is not allowed from the current state."""


class Forbidden(JobError):
    """Raised when the caller lacks the role or ownership for an operation."""


class JobPersistenceError(JobError):
    """Raised when the job record could not be written after files were stored."""
