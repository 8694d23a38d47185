"""Error hierarchy shared by the print desk services.

Every error raised on purpose derives from :class:`PrintDeskError`; storage
failures are translated into :class:`RepositoryError` subclasses so services
never see SQLAlchemy types.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, TypeVar

from sqlalchemy import exc as sa_exc

__all__ = [
    "PrintDeskError",
    "RepositoryError",
    "NotFoundError",
    "IntegrityConstraintViolation",
    "DatabaseOperationError",
    "ensure_found",
    "handle_sqlalchemy_errors",
]

T = TypeVar("T")


class PrintDeskError(Exception):
    """Root of every print desk error."""


class RepositoryError(PrintDeskError):
    """A job or counter row could not be read or written."""


class NotFoundError(RepositoryError):
    """No row with the requested id."""


class IntegrityConstraintViolation(RepositoryError):
    pass


class DatabaseOperationError(RepositoryError):
    pass


def ensure_found(record: T | None, *, entity: str, identifier: str) -> T:
    """Return ``record`` or raise :class:`NotFoundError` naming the missing row."""
    if record is None:
        raise NotFoundError(f"{entity} '{identifier}' not found")
    return record


def _with_entity(entity: str | None, message: str) -> str:
    return f"{entity}: {message}" if entity else message


@contextmanager
def handle_sqlalchemy_errors(*, entity: str | None = None) -> Iterator[None]:
    """Re-raise database errors from the wrapped block as :class:`RepositoryError`.

    ``entity`` (``"print_job"``, ``"counter"``) prefixes the message so logs say
    which table failed.
    """
    try:
        yield
    except sa_exc.IntegrityError as exc:
        raise IntegrityConstraintViolation(
            _with_entity(entity, "integrity constraint violated")
        ) from exc
    except sa_exc.DBAPIError as exc:
        raise DatabaseOperationError(_with_entity(entity, "database operation failed")) from exc
