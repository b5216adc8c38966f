"""Reconcile a run's category, platform and level against the reference tables.

Responsibilities:
- drop identifiers that no longer exist or belong to another leaderboard type
- fill blank identifiers from the speedrun.com names captured at import time
- keep ``level`` empty for full-game (regular) runs
- report the minimal set of field changes needed to persist the result

The engine is pure: it never performs I/O and never mutates the record.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypedDict

from runboard.domain.model import LeaderboardType
from runboard.domain.normalization import DEFAULT_NORMALIZERS

if TYPE_CHECKING:
    from runboard.domain.model import RunRecord
    from runboard.domain.normalization import FieldNormalizers

    from .snapshot import ReferenceSnapshot


class RunFieldUpdates(TypedDict, total=False):
    """Partial run document carrying only the fields that must change."""

    category: str
    platform: str
    level: str


@dataclass(slots=True, frozen=True, kw_only=True)
class ReconciliationResult:
    category: str
    platform: str
    level: str
    updates: RunFieldUpdates = field(default_factory=RunFieldUpdates)

    @property
    def has_updates(self) -> bool:
        return bool(self.updates)


def reconcile_run(
    run: RunRecord,
    snapshot: ReferenceSnapshot,
    *,
    normalizers: FieldNormalizers | None = None,
) -> ReconciliationResult:
    """Repair ``run``'s reference fields against ``snapshot`` and compute the diff."""

    normalize = normalizers or DEFAULT_NORMALIZERS
    leaderboard_type = normalize.leaderboard_type(run.leaderboard_type)
    original_category = normalize.category(run.category)
    original_platform = normalize.platform(run.platform)
    original_level = normalize.level(run.level)

    category = _repair_category(
        original_category,
        run.src_category_name,
        leaderboard_type=leaderboard_type,
        snapshot=snapshot,
        normalizers=normalize,
    )
    platform = _repair_platform(original_platform, run.src_platform_name, snapshot=snapshot)
    level = _repair_level(
        original_level,
        run.src_level_name,
        leaderboard_type=leaderboard_type,
        snapshot=snapshot,
    )

    updates = RunFieldUpdates()
    if category != original_category:
        updates["category"] = category
    if platform != original_platform:
        updates["platform"] = platform
    if not leaderboard_type.uses_levels:
        # Compared raw: a stored "undefined" normalizes to "" yet is still a value.
        if isinstance(run.level, str) and run.level.strip():
            updates["level"] = ""
    elif level != original_level:
        updates["level"] = level

    return ReconciliationResult(
        category=category,
        platform=platform,
        level=level,
        updates=updates,
    )


def _repair_category(
    category: str,
    src_name: str | None,
    *,
    leaderboard_type: LeaderboardType,
    snapshot: ReferenceSnapshot,
    normalizers: FieldNormalizers,
) -> str:
    if category:
        existing = snapshot.category_by_id(category)
        if existing is None or normalizers.leaderboard_type(
            existing.leaderboard_type
        ) != leaderboard_type:
            category = ""
    if not category and src_name:
        match = snapshot.category_by_name(
            src_name,
            leaderboard_type,
            normalize_type=normalizers.leaderboard_type,
        )
        if match is not None:
            category = match.id
    return category


def _repair_platform(platform: str, src_name: str | None, *, snapshot: ReferenceSnapshot) -> str:
    if platform and snapshot.platform_by_id(platform) is None:
        platform = ""
    if not platform and src_name:
        match = snapshot.platform_by_name(src_name)
        if match is not None:
            platform = match.id
    return platform


def _repair_level(
    level: str,
    src_name: str | None,
    *,
    leaderboard_type: LeaderboardType,
    snapshot: ReferenceSnapshot,
) -> str:
    if not leaderboard_type.uses_levels:
        return ""
    # Existing level ids are trusted; only blank ones are filled.
    if not level and src_name:
        match = snapshot.level_by_name(src_name)
        if match is not None:
            level = match.id
    return level
