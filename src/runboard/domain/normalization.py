"""Shape normalization for raw identifiers and leaderboard types.

Records arrive from web submissions and speedrun.com imports, so identifier
fields can hold ``None``, padded strings or serialized JavaScript sentinels.
These helpers coerce them into the shape the reconciliation engine expects
without consulting any reference table.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from runboard.domain.model import LeaderboardType

_EMPTY_SENTINELS: Final[frozenset[str]] = frozenset({"undefined", "null", "none"})

_LEADERBOARD_TYPE_ALIASES: Final[dict[str, LeaderboardType]] = {
    "regular": LeaderboardType.REGULAR,
    "full-game": LeaderboardType.REGULAR,
    "fullgame": LeaderboardType.REGULAR,
    "individual-level": LeaderboardType.INDIVIDUAL_LEVEL,
    "individual-levels": LeaderboardType.INDIVIDUAL_LEVEL,
    "il": LeaderboardType.INDIVIDUAL_LEVEL,
    "community-golds": LeaderboardType.COMMUNITY_GOLDS,
    "community-gold": LeaderboardType.COMMUNITY_GOLDS,
    "cg": LeaderboardType.COMMUNITY_GOLDS,
}

type IdNormalizer = Callable[[object], str]
type LeaderboardTypeNormalizer = Callable[[object], LeaderboardType]


def normalize_identifier(raw: object) -> str:
    """Return ``raw`` as a trimmed identifier string, or ``""`` if it holds none."""

    if raw is None or isinstance(raw, bool):
        return ""
    if isinstance(raw, int):
        return str(raw)
    if not isinstance(raw, str):
        return ""
    value = raw.strip()
    if value.lower() in _EMPTY_SENTINELS:
        return ""
    return value


def normalize_category_id(raw: object) -> str:
    return normalize_identifier(raw)


def normalize_platform_id(raw: object) -> str:
    return normalize_identifier(raw)


def normalize_level_id(raw: object) -> str:
    return normalize_identifier(raw)


def normalize_leaderboard_type(raw: object) -> LeaderboardType:
    """Coerce ``raw`` into the closed ``LeaderboardType`` enum.

    Missing and unrecognised values fall back to ``REGULAR``; categories created
    before leaderboard types existed carry no type at all.
    """

    if isinstance(raw, LeaderboardType):
        return raw
    if not isinstance(raw, str):
        return LeaderboardType.REGULAR
    key = raw.strip().lower().replace("_", "-").replace(" ", "-")
    return _LEADERBOARD_TYPE_ALIASES.get(key, LeaderboardType.REGULAR)


def normalize_match_name(name: str | None) -> str:
    """Key used for fallback-by-name matching: stripped and case-folded."""

    if not name:
        return ""
    return name.strip().lower()


@dataclass(slots=True, frozen=True, kw_only=True)
class FieldNormalizers:
    """Bundle of normalization collaborators used by the reconciliation engine."""

    category: IdNormalizer = normalize_category_id
    platform: IdNormalizer = normalize_platform_id
    level: IdNormalizer = normalize_level_id
    leaderboard_type: LeaderboardTypeNormalizer = normalize_leaderboard_type


DEFAULT_NORMALIZERS: Final[FieldNormalizers] = FieldNormalizers()
