"""Database initialization helpers."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from .db_models import Base


def init_db(engine: Engine) -> None:
    """Create tables when they do not exist yet.

    Deployments running Alembic get the same schema from ``alembic upgrade head``;
    ``create_all`` is a no-op on tables that are already there.
    """
    Base.metadata.create_all(engine)
