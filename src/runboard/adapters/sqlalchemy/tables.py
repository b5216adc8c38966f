"""SQLAlchemy table metadata for the leaderboard collections."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Column, Index, MetaData, String, Table

from runboard.domain.model import Category, Level, Platform, RunRecord
from runboard.domain.normalization import normalize_leaderboard_type

if TYPE_CHECKING:
    from sqlalchemy import Row

metadata = MetaData()

run_table = Table(
    "leaderboard_entries",
    metadata,
    Column("id", String(128), primary_key=True),
    Column("leaderboard_type", String(32), nullable=True),
    Column("category", String(128), nullable=False, default=""),
    Column("platform", String(128), nullable=False, default=""),
    Column("level", String(128), nullable=False, default=""),
    Column("src_category_name", String(255), nullable=True),
    Column("src_platform_name", String(255), nullable=True),
    Column("src_level_name", String(255), nullable=True),
    Column("player_name", String(255), nullable=True),
    Column("verified", Boolean, nullable=False, default=False),
    Column("verified_by", String(128), nullable=True),
    Index("ix_leaderboard_entries_verified", "verified"),
)

category_table = Table(
    "categories",
    metadata,
    Column("id", String(128), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("leaderboard_type", String(32), nullable=True),
)

platform_table = Table(
    "platforms",
    metadata,
    Column("id", String(128), primary_key=True),
    Column("name", String(255), nullable=False),
)

level_table = Table(
    "levels",
    metadata,
    Column("id", String(128), primary_key=True),
    Column("name", String(255), nullable=False),
)


def run_from_row(row: Row[tuple[object, ...]]) -> RunRecord:
    values = row._mapping  # noqa: SLF001
    return RunRecord(
        id=values["id"],
        leaderboard_type=values["leaderboard_type"],
        category=values["category"] or "",
        platform=values["platform"] or "",
        level=values["level"] or "",
        src_category_name=values["src_category_name"],
        src_platform_name=values["src_platform_name"],
        src_level_name=values["src_level_name"],
        player_name=values["player_name"],
        verified=bool(values["verified"]),
        verified_by=values["verified_by"],
    )


def run_to_row(run: RunRecord) -> dict[str, object]:
    return {
        "id": run.id,
        "leaderboard_type": str(run.leaderboard_type) if run.leaderboard_type else None,
        "category": run.category or "",
        "platform": run.platform or "",
        "level": run.level or "",
        "src_category_name": run.src_category_name,
        "src_platform_name": run.src_platform_name,
        "src_level_name": run.src_level_name,
        "player_name": run.player_name,
        "verified": run.verified,
        "verified_by": run.verified_by,
    }


def category_from_row(row: Row[tuple[object, ...]]) -> Category:
    values = row._mapping  # noqa: SLF001
    return Category(
        id=values["id"],
        name=values["name"],
        leaderboard_type=normalize_leaderboard_type(values["leaderboard_type"]),
    )


def platform_from_row(row: Row[tuple[object, ...]]) -> Platform:
    values = row._mapping  # noqa: SLF001
    return Platform(id=values["id"], name=values["name"])


def level_from_row(row: Row[tuple[object, ...]]) -> Level:
    values = row._mapping  # noqa: SLF001
    return Level(id=values["id"], name=values["name"])
