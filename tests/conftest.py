from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from runboard.adapters.sqlalchemy import shutdown, startup
from runboard.domain.model import Category, LeaderboardType, Level, Platform
from tests.helpers.runs import FakeReferenceDataSource

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

_ENV_VARS = (
    "DATABASE_URI",
    "DATABASE_ECHO",
    "RUNBOARD_DATA_DIR",
    "RUNBOARD_BACKEND",
    "RUNBOARD_VERIFY_BATCH_SIZE",
    "FIRESTORE_PROJECT_ID",
    "FIRESTORE_API_KEY",
    "FIRESTORE_ACCESS_TOKEN",
    "FIRESTORE_DATABASE",
    "FIRESTORE_EMULATOR_HOST",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def categories() -> list[Category]:
    return [
        Category(id="c-any", name="Any%", leaderboard_type=LeaderboardType.REGULAR),
        Category(id="c-100", name="100%", leaderboard_type=LeaderboardType.REGULAR),
        Category(id="c-il-any", name="Any%", leaderboard_type=LeaderboardType.INDIVIDUAL_LEVEL),
        Category(id="c-cg", name="Gold Rush", leaderboard_type=LeaderboardType.COMMUNITY_GOLDS),
    ]


@pytest.fixture
def platforms() -> list[Platform]:
    return [Platform(id="p-gc", name="GameCube"), Platform(id="p-pc", name="PC")]


@pytest.fixture
def levels() -> list[Level]:
    return [Level(id="l-1", name="Cavern"), Level(id="l-2", name="Sky Fortress")]


@pytest.fixture
def reference_data(
    categories: list[Category],
    platforms: list[Platform],
    levels: list[Level],
) -> FakeReferenceDataSource:
    return FakeReferenceDataSource(categories=categories, platforms=platforms, levels=levels)


@pytest.fixture
async def sqlite_engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'runboard.db'}")
    await startup(engine=engine, force=True)
    try:
        yield engine
    finally:
        await shutdown()
