"""Repository implementations backed by async SQLAlchemy sessions.

Every operation opens its own short-lived session, so repositories can be
shared by concurrently running verification tasks.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from runboard.domain.normalization import normalize_leaderboard_type

from .database import session_factory
from .tables import (
    category_from_row,
    category_table,
    level_from_row,
    level_table,
    platform_from_row,
    platform_table,
    run_from_row,
    run_table,
    run_to_row,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from sqlalchemy import Table
    from sqlalchemy.engine import CursorResult
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from runboard.domain.model import Category, LeaderboardType, Level, Platform, RunRecord
    from runboard.domain.reconciliation import RunFieldUpdates

log = getLogger(__name__)

_UPDATABLE_RUN_FIELDS = ("category", "platform", "level")


class _SessionScoped:
    def __init__(self, sessions: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._sessions = sessions

    def _session(self) -> AsyncSession:
        factory = self._sessions or session_factory()
        return factory()

    async def _replace_rows(self, table: Table, rows: Iterable[Mapping[str, object]]) -> int:
        by_id = {row["id"]: dict(row) for row in rows}
        if not by_id:
            return 0
        async with self._session() as session, session.begin():
            await session.execute(delete(table).where(table.c.id.in_(list(by_id))))
            await session.execute(insert(table), list(by_id.values()))
        return len(by_id)


class SqlAlchemyReferenceDataRepository(_SessionScoped):
    """Categories, platforms and levels stored in SQL tables."""

    async def get_categories(
        self,
        leaderboard_type: LeaderboardType | None = None,
    ) -> list[Category]:
        async with self._session() as session:
            result = await session.execute(select(category_table).order_by(category_table.c.id))
            categories = [category_from_row(row) for row in result]
        if leaderboard_type is None:
            return categories
        wanted = normalize_leaderboard_type(leaderboard_type)
        return [category for category in categories if category.leaderboard_type == wanted]

    async def get_platforms(self) -> list[Platform]:
        async with self._session() as session:
            result = await session.execute(select(platform_table).order_by(platform_table.c.id))
            return [platform_from_row(row) for row in result]

    async def get_levels(self) -> list[Level]:
        async with self._session() as session:
            result = await session.execute(select(level_table).order_by(level_table.c.id))
            return [level_from_row(row) for row in result]

    async def save_categories(self, categories: Iterable[Category]) -> int:
        return await self._replace_rows(
            category_table,
            (
                {
                    "id": category.id,
                    "name": category.name,
                    "leaderboard_type": str(category.leaderboard_type),
                }
                for category in categories
            ),
        )

    async def save_platforms(self, platforms: Iterable[Platform]) -> int:
        return await self._replace_rows(
            platform_table,
            ({"id": platform.id, "name": platform.name} for platform in platforms),
        )

    async def save_levels(self, levels: Iterable[Level]) -> int:
        return await self._replace_rows(
            level_table,
            ({"id": level.id, "name": level.name} for level in levels),
        )


class SqlAlchemyRunRepository(_SessionScoped):
    """Run records stored in the ``leaderboard_entries`` table."""

    async def get_run_by_id(self, run_id: str) -> RunRecord | None:
        async with self._session() as session:
            result = await session.execute(select(run_table).where(run_table.c.id == run_id))
            row = result.one_or_none()
        return run_from_row(row) if row is not None else None

    async def list_unverified_runs(self, *, limit: int | None = None) -> list[RunRecord]:
        stmt = select(run_table).where(run_table.c.verified.is_(False)).order_by(run_table.c.id)
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._session() as session:
            result = await session.execute(stmt)
            return [run_from_row(row) for row in result]

    async def save_runs(self, runs: Iterable[RunRecord]) -> int:
        return await self._replace_rows(run_table, (run_to_row(run) for run in runs))

    async def update_leaderboard_entry(self, run_id: str, updates: RunFieldUpdates) -> bool:
        values = {name: updates[name] for name in _UPDATABLE_RUN_FIELDS if name in updates}
        if not values:
            return await self.get_run_by_id(run_id) is not None
        return await self._update_run(run_id, values)

    async def update_run_verification_status(
        self,
        run_id: str,
        verified: bool,  # noqa: FBT001
        verified_by: str | None = None,
    ) -> bool:
        values: dict[str, object] = {
            "verified": verified,
            "verified_by": verified_by if verified else None,
        }
        return await self._update_run(run_id, values)

    async def _update_run(self, run_id: str, values: dict[str, object]) -> bool:
        stmt = update(run_table).where(run_table.c.id == run_id).values(**values)
        try:
            async with self._session() as session, session.begin():
                result = cast("CursorResult[Any]", await session.execute(stmt))
                matched = result.rowcount
        except SQLAlchemyError:
            log.exception("Failed to update run %s with %s", run_id, sorted(values))
            return False
        if matched == 0:
            log.warning("Run %s not found; nothing updated", run_id)
            return False
        return True
