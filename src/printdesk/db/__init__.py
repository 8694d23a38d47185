"""Database models and initialization."""

from .db_init import init_db
from .db_models import Base, CounterModel, PrintJobFileModel, PrintJobModel

__all__ = [
    "Base",
    "CounterModel",
    "PrintJobFileModel",
    "PrintJobModel",
    "init_db",
]
