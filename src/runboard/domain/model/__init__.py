"""Domain model for leaderboard runs and their reference tables."""

from __future__ import annotations

from .enums import LeaderboardType
from .reference import Category, Level, Platform
from .run import UNKNOWN_PLAYER_NAME, RunRecord

__all__ = [
    "UNKNOWN_PLAYER_NAME",
    "Category",
    "LeaderboardType",
    "Level",
    "Platform",
    "RunRecord",
]
