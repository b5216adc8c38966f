"""SQLAlchemy (async) storage for runs and reference data."""

from __future__ import annotations

from .database import (
    StartupError,
    configured_engine,
    is_started,
    session_factory,
    shutdown,
    startup,
)
from .repositories import SqlAlchemyReferenceDataRepository, SqlAlchemyRunRepository
from .tables import category_table, level_table, metadata, platform_table, run_table

__all__ = [
    "SqlAlchemyReferenceDataRepository",
    "SqlAlchemyRunRepository",
    "StartupError",
    "category_table",
    "configured_engine",
    "is_started",
    "level_table",
    "metadata",
    "platform_table",
    "run_table",
    "session_factory",
    "shutdown",
    "startup",
]
