from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy.orm import sessionmaker

from printdesk.config import build_engine
from printdesk.db.db_init import init_db
from printdesk.media.object_store import LocalObjectStore
from printdesk.repositories.print_job_repository import PrintJobRepository


@pytest.fixture
def engine(tmp_path: Path):
    engine = build_engine(f"sqlite:///{tmp_path / 'printdesk.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def job_repo(session_factory) -> PrintJobRepository:
    return PrintJobRepository(session_factory)


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    root = tmp_path / "storage"
    root.mkdir()
    return root


@pytest.fixture
def object_store(storage_root: Path) -> LocalObjectStore:
    return LocalObjectStore(root=storage_root)
