"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class LeaderboardType(StrEnum):
    """Classification that scopes which categories and levels a run may use."""

    REGULAR = "regular"
    INDIVIDUAL_LEVEL = "individual-level"
    COMMUNITY_GOLDS = "community-golds"

    @property
    def uses_levels(self) -> bool:
        return self is not LeaderboardType.REGULAR
