"""Load the reference snapshot a verification run reconciles against."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from runboard.domain.model import LeaderboardType
from runboard.domain.reconciliation import ReferenceSnapshot

if TYPE_CHECKING:
    from runboard.domain.ports import ReferenceDataSource

log = getLogger(__name__)


async def fetch_reference_snapshot(source: ReferenceDataSource) -> ReferenceSnapshot:
    """Fetch every category partition, all platforms and all levels concurrently.

    Each accessor is awaited exactly once, so the cost is independent of how
    many runs are reconciled against the returned snapshot.
    """

    regular, individual_level, community_golds, platforms, levels = await asyncio.gather(
        source.get_categories(LeaderboardType.REGULAR),
        source.get_categories(LeaderboardType.INDIVIDUAL_LEVEL),
        source.get_categories(LeaderboardType.COMMUNITY_GOLDS),
        source.get_platforms(),
        source.get_levels(),
    )
    snapshot = ReferenceSnapshot.build(
        categories=(*regular, *individual_level, *community_golds),
        platforms=platforms,
        levels=levels,
    )
    log.debug(
        "Loaded reference snapshot: categories=%s, platforms=%s, levels=%s",
        len(snapshot.categories),
        len(snapshot.platforms),
        len(snapshot.levels),
    )
    return snapshot
