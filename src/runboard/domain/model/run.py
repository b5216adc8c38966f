"""Run records as reported by players or imported from speedrun.com."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import LeaderboardType

UNKNOWN_PLAYER_NAME = "Unknown"


@dataclass(slots=True, kw_only=True)
class RunRecord:
    """A single reported performance.

    ``category``, ``platform`` and ``level`` hold identifiers into the reference
    tables and may be stale or blank until the run is reconciled. The ``src_*``
    names are captured from an import source and only serve as fallback
    matching keys.

    ``leaderboard_type`` is kept as received (``LeaderboardType`` or a raw
    string) so reconciliation can normalize it the same way as the id fields.
    """

    id: str = ""
    leaderboard_type: LeaderboardType | str | None = LeaderboardType.REGULAR
    category: str | None = ""
    platform: str | None = ""
    level: str | None = ""
    src_category_name: str | None = None
    src_platform_name: str | None = None
    src_level_name: str | None = None
    player_name: str | None = None
    verified: bool = False
    verified_by: str | None = None

    @property
    def display_name(self) -> str:
        name = (self.player_name or "").strip()
        return name or UNKNOWN_PLAYER_NAME
