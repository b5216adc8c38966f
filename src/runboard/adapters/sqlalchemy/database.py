"""Async SQLAlchemy engine lifecycle for the leaderboard store."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from runboard.config import get_database_config

from .tables import metadata

if TYPE_CHECKING:
    from runboard.config import DatabaseConfig

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy adapter is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: AsyncEngine | None = None
    _session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine | None:
        return self._engine

    @engine.setter
    def engine(self, value: AsyncEngine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call runboard.adapters.sqlalchemy."
                "database.startup() before requesting a session."
            )
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


async def startup(
    *,
    engine: AsyncEngine | None = None,
    config: DatabaseConfig | None = None,
    force: bool = False,
) -> None:
    """Create the async engine, ensure the tables exist and prepare the session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )
    if _STATE.engine is not None:
        await shutdown()

    if engine is None:
        database = config or get_database_config()
        engine = create_async_engine(database.uri, echo=database.echo)
    async with engine.begin() as connection:
        await connection.run_sync(metadata.create_all)

    log.debug("SQLAlchemy adapter started: %s", engine.url.render_as_string(hide_password=True))
    _STATE.engine = engine


def configured_engine() -> AsyncEngine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def session_factory() -> async_sessionmaker[AsyncSession]:
    return _STATE.session_factory


async def shutdown() -> None:
    """Dispose the managed engine and reset state."""

    if _STATE.engine is not None:
        await _STATE.engine.dispose()
    _STATE.engine = None
