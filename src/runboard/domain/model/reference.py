"""Canonical reference entries owned by moderation tooling."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import LeaderboardType


@dataclass(slots=True, frozen=True, kw_only=True)
class Category:
    id: str
    name: str
    leaderboard_type: LeaderboardType = LeaderboardType.REGULAR


@dataclass(slots=True, frozen=True, kw_only=True)
class Platform:
    id: str
    name: str


@dataclass(slots=True, frozen=True, kw_only=True)
class Level:
    id: str
    name: str
