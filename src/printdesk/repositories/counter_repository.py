"""Counter rows updated under a row lock with a version check."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from sqlalchemy import exc as sa_exc
from sqlalchemy import update
from sqlalchemy.orm import Session

from ..db.db_models import CounterModel
from ..exceptions import handle_sqlalchemy_errors
from ..slots.slots_errors import AllocationConflict
from .interfaces import CounterUpdate


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CounterRepository:
    """Read-modify-write access to the ``counter`` table.

    Each call is one transaction that takes the write lock on the row before
    reading it, so concurrent writers (threads or separate server processes)
    queue up instead of racing. The update still only applies when the row
    carries the version that was read.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def read_modify_write(self, key: str, fn: Callable[[int | None], int]) -> CounterUpdate:
        with handle_sqlalchemy_errors(entity="counter"):
            try:
                return self._apply(key, fn)
            except (sa_exc.IntegrityError, sa_exc.OperationalError) as exc:
                # concurrent first insert or a lock wait that timed out
                raise AllocationConflict(f"counter '{key}' transaction did not commit") from exc

    def read(self, key: str) -> int | None:
        with handle_sqlalchemy_errors(entity="counter"), self._session_factory() as session:
            row = session.get(CounterModel, key)
            return None if row is None else row.value

    def _apply(self, key: str, fn: Callable[[int | None], int]) -> CounterUpdate:
        with self._session_factory() as session:
            self._lock_row(session, key)
            row = session.get(CounterModel, key, with_for_update=True)
            if row is None:
                current = fn(None)
                session.add(
                    CounterModel(key=key, value=current, version=1, updated_at=_utcnow())
                )
                session.commit()
                return CounterUpdate(previous=None, current=current)

            previous, version = row.value, row.version
            current = fn(previous)
            result = session.execute(
                update(CounterModel)
                .where(CounterModel.key == key, CounterModel.version == version)
                .values(value=current, version=version + 1, updated_at=_utcnow())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                session.rollback()
                raise AllocationConflict(
                    f"counter '{key}' changed concurrently at version {version}"
                )
            session.commit()
            return CounterUpdate(previous=previous, current=current)

    @staticmethod
    def _lock_row(session: Session, key: str) -> None:
        # SQLite ignores FOR UPDATE; a no-op write takes its database write lock
        session.execute(
            update(CounterModel)
            .where(CounterModel.key == key)
            .values(version=CounterModel.version)
            .execution_options(synchronize_session=False)
        )
