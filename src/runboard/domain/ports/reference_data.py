"""Read-only access to the canonical reference tables."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from runboard.domain.model import Category, LeaderboardType, Level, Platform


@runtime_checkable
class ReferenceDataSource(Protocol):
    """Accessors for categories, platforms and levels.

    ``get_categories`` without a leaderboard type returns every category;
    with one it returns the categories of that type, legacy untyped categories
    counting as ``regular``.
    """

    async def get_categories(
        self,
        leaderboard_type: LeaderboardType | None = None,
    ) -> Sequence[Category]: ...

    async def get_platforms(self) -> Sequence[Platform]: ...

    async def get_levels(self) -> Sequence[Level]: ...
