"""Application configuration builder.

Settings are read from ``PRINTDESK_*`` environment variables (and a local
``.env`` file) through pydantic-settings; :func:`load_config` turns them into
an :class:`AppConfig` holding the database engine and session factory.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .db.db_init import init_db


def _default_storage_root() -> Path:
    return Path("./var/storage")


class PrintDeskSettings(BaseSettings):
    """Environment driven settings for the print desk service."""

    model_config = SettingsConfigDict(
        env_prefix="PRINTDESK_", env_file=".env", extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///printdesk.db",
        description="SQLAlchemy URL of the job store.",
    )
    storage_root: Path = Field(
        default_factory=_default_storage_root,
        description="Filesystem root of the object store.",
    )
    public_files_url: str = Field(
        default="/files",
        description="URL prefix under which stored files are served.",
    )
    max_slots: int = Field(default=50, ge=1, description="Size of the pickup slot pool.")
    slots_per_group: int = Field(
        default=10, ge=1, description="Slots sharing one group letter."
    )
    retention_hours: float = Field(
        default=24,
        gt=0,
        description="Age after which Collected jobs are swept.",
    )
    allocation_max_attempts: int = Field(
        default=5,
        ge=1,
        description="Attempts at the slot counter transaction before giving up.",
    )
    sweep_interval_seconds: float = Field(
        default=15 * 60,
        ge=0,
        description="Background retention sweep interval; 0 disables the task.",
    )
    jwt_signing_key: str = Field(
        default="change-me",
        min_length=1,
        description="Secret used to verify bearer tokens.",
    )
    jwt_algorithm: str = Field(default="HS256")

    @property
    def retention_window(self) -> timedelta:
        return timedelta(hours=self.retention_hours)


@dataclass(slots=True)
class AppConfig:
    settings: PrintDeskSettings
    engine: Engine
    session_factory: sessionmaker[Session]

    @property
    def storage_root(self) -> Path:
        return self.settings.storage_root


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections may be shared across threadpool workers."""
    connect_args: dict[str, object] = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, future=True, connect_args=connect_args)


def load_config(settings: PrintDeskSettings | None = None) -> AppConfig:
    """Load configuration from environment (SQLite by default)."""
    cfg = settings or PrintDeskSettings()
    cfg.storage_root.mkdir(parents=True, exist_ok=True)

    engine = build_engine(cfg.database_url)
    session_factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)
    init_db(engine)

    return AppConfig(settings=cfg, engine=engine, session_factory=session_factory)
