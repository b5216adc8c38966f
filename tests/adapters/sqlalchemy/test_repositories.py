"""Tests for the async SQLAlchemy repositories."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select

from runboard.adapters.sqlalchemy import (
    SqlAlchemyReferenceDataRepository,
    SqlAlchemyRunRepository,
    StartupError,
    run_table,
    session_factory,
    startup,
)
from runboard.domain.model import Category, LeaderboardType, Level, Platform
from tests.helpers.runs import make_run

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.mark.usefixtures("sqlite_engine")
async def test_reference_data_round_trip() -> None:
    repository = SqlAlchemyReferenceDataRepository()
    await repository.save_categories(
        [
            Category(id="c2", name="100%"),
            Category(id="c1", name="Any%", leaderboard_type=LeaderboardType.INDIVIDUAL_LEVEL),
        ]
    )
    await repository.save_platforms([Platform(id="p1", name="PC")])
    await repository.save_levels([Level(id="l1", name="Cavern")])

    assert [category.id for category in await repository.get_categories()] == ["c1", "c2"]
    individual = await repository.get_categories(LeaderboardType.INDIVIDUAL_LEVEL)
    assert individual == [
        Category(id="c1", name="Any%", leaderboard_type=LeaderboardType.INDIVIDUAL_LEVEL),
    ]
    assert await repository.get_categories(LeaderboardType.COMMUNITY_GOLDS) == []
    assert await repository.get_platforms() == [Platform(id="p1", name="PC")]
    assert await repository.get_levels() == [Level(id="l1", name="Cavern")]


@pytest.mark.usefixtures("sqlite_engine")
async def test_save_replaces_rows_with_same_id() -> None:
    repository = SqlAlchemyReferenceDataRepository()
    await repository.save_platforms([Platform(id="p1", name="PC")])

    saved = await repository.save_platforms(
        [Platform(id="p1", name="Windows"), Platform(id="p2", name="Wii")]
    )

    assert saved == 2
    assert [platform.name for platform in await repository.get_platforms()] == [
        "Windows",
        "Wii",
    ]


@pytest.mark.usefixtures("sqlite_engine")
async def test_run_repository_lists_unverified_runs() -> None:
    repository = SqlAlchemyRunRepository()
    await repository.save_runs(
        [
            make_run("run-b", src_category_name="Any%"),
            make_run("run-a", leaderboard_type="individual-level"),
            make_run("run-c", verified=True),
        ]
    )

    pending = await repository.list_unverified_runs()
    limited = await repository.list_unverified_runs(limit=1)

    assert [run.id for run in pending] == ["run-a", "run-b"]
    assert [run.id for run in limited] == ["run-a"]
    assert pending[0].leaderboard_type == "individual-level"
    assert pending[1].src_category_name == "Any%"


@pytest.mark.usefixtures("sqlite_engine")
async def test_update_leaderboard_entry_writes_only_given_fields() -> None:
    repository = SqlAlchemyRunRepository()
    await repository.save_runs([make_run("run-1", category="old", platform="p1", level="l1")])

    updated = await repository.update_leaderboard_entry("run-1", {"category": "c1", "level": ""})

    assert updated
    run = await repository.get_run_by_id("run-1")
    assert run is not None
    assert (run.category, run.platform, run.level) == ("c1", "p1", "")


@pytest.mark.usefixtures("sqlite_engine")
async def test_updates_on_missing_run_return_false() -> None:
    repository = SqlAlchemyRunRepository()

    assert await repository.get_run_by_id("ghost") is None
    assert not await repository.update_leaderboard_entry("ghost", {"category": "c1"})
    assert not await repository.update_leaderboard_entry("ghost", {})
    assert not await repository.update_run_verification_status("ghost", True, "mod-1")  # noqa: FBT003


@pytest.mark.usefixtures("sqlite_engine")
async def test_verification_status_round_trip() -> None:
    repository = SqlAlchemyRunRepository()
    await repository.save_runs([make_run("run-1")])

    assert await repository.update_run_verification_status("run-1", True, "mod-1")  # noqa: FBT003
    verified = await repository.get_run_by_id("run-1")
    assert await repository.update_run_verification_status("run-1", False, "mod-1")  # noqa: FBT003
    unverified = await repository.get_run_by_id("run-1")

    assert verified is not None
    assert (verified.verified, verified.verified_by) == (True, "mod-1")
    assert unverified is not None
    assert (unverified.verified, unverified.verified_by) == (False, None)
    assert await repository.list_unverified_runs() == [unverified]


@pytest.mark.usefixtures("sqlite_engine")
async def test_rows_are_persisted_to_the_table() -> None:
    await SqlAlchemyRunRepository().save_runs([make_run("run-1", player_name="Alice")])

    async with session_factory()() as session:
        rows = (await session.execute(select(run_table.c.id, run_table.c.player_name))).all()

    assert [tuple(row) for row in rows] == [("run-1", "Alice")]


async def test_startup_twice_requires_force(sqlite_engine: AsyncEngine) -> None:
    with pytest.raises(StartupError, match="already initialised"):
        await startup(engine=sqlite_engine)
