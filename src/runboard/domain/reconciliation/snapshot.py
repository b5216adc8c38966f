"""Immutable view of the reference tables used for one reconciliation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from runboard.domain.normalization import normalize_leaderboard_type, normalize_match_name

if TYPE_CHECKING:
    from collections.abc import Iterable

    from runboard.domain.model import Category, LeaderboardType, Level, Platform
    from runboard.domain.normalization import LeaderboardTypeNormalizer


@dataclass(slots=True, frozen=True)
class ReferenceSnapshot:
    """Categories, platforms and levels as they were when the snapshot was taken.

    Every record reconciled within one verification run sees the same snapshot.
    Lookups keep the first entry for a duplicated id or name, matching a linear
    scan over the original table order.
    """

    categories: tuple[Category, ...] = ()
    platforms: tuple[Platform, ...] = ()
    levels: tuple[Level, ...] = ()
    _categories_by_id: dict[str, Category] = field(init=False, repr=False, compare=False)
    _platforms_by_id: dict[str, Platform] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_categories_by_id", _first_by_id(self.categories))
        object.__setattr__(self, "_platforms_by_id", _first_by_id(self.platforms))

    @classmethod
    def build(
        cls,
        *,
        categories: Iterable[Category] = (),
        platforms: Iterable[Platform] = (),
        levels: Iterable[Level] = (),
    ) -> ReferenceSnapshot:
        return cls(
            categories=tuple(categories),
            platforms=tuple(platforms),
            levels=tuple(levels),
        )

    def category_by_id(self, category_id: str) -> Category | None:
        return self._categories_by_id.get(category_id)

    def platform_by_id(self, platform_id: str) -> Platform | None:
        return self._platforms_by_id.get(platform_id)

    def category_by_name(
        self,
        name: str | None,
        leaderboard_type: LeaderboardType,
        *,
        normalize_type: LeaderboardTypeNormalizer = normalize_leaderboard_type,
    ) -> Category | None:
        key = normalize_match_name(name)
        if not key:
            return None
        for category in self.categories:
            if normalize_type(category.leaderboard_type) != leaderboard_type:
                continue
            if normalize_match_name(category.name) == key:
                return category
        return None

    def platform_by_name(self, name: str | None) -> Platform | None:
        return _first_by_name(self.platforms, name)

    def level_by_name(self, name: str | None) -> Level | None:
        return _first_by_name(self.levels, name)


def _first_by_id[TEntry: (Category, Platform)](entries: tuple[TEntry, ...]) -> dict[str, TEntry]:
    indexed: dict[str, TEntry] = {}
    for entry in entries:
        indexed.setdefault(entry.id, entry)
    return indexed


def _first_by_name[TEntry: (Platform, Level)](
    entries: tuple[TEntry, ...],
    name: str | None,
) -> TEntry | None:
    key = normalize_match_name(name)
    if not key:
        return None
    for entry in entries:
        if normalize_match_name(entry.name) == key:
            return entry
    return None
