import pytest
from sqlalchemy import exc as sa_exc

from printdesk.exceptions import (
    DatabaseOperationError,
    IntegrityConstraintViolation,
    NotFoundError,
    ensure_found,
    handle_sqlalchemy_errors,
)


def test_integrity_errors_name_the_table() -> None:
    with pytest.raises(IntegrityConstraintViolation, match="^print_job: integrity"):
        with handle_sqlalchemy_errors(entity="print_job"):
            raise sa_exc.IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))


def test_other_driver_errors_become_database_errors() -> None:
    with pytest.raises(DatabaseOperationError, match="^database operation failed$"):
        with handle_sqlalchemy_errors():
            raise sa_exc.OperationalError("SELECT 1", {}, Exception("disk I/O error"))


def test_ensure_found() -> None:
    assert ensure_found(3, entity="print_job", identifier="abc") == 3
    with pytest.raises(NotFoundError, match="print_job 'abc' not found"):
        ensure_found(None, entity="print_job", identifier="abc")
