"""Repository implementations backed by the Firestore REST API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx

from runboard.adapters.documents import parse_category, parse_level, parse_platform, parse_run
from runboard.domain.normalization import normalize_leaderboard_type

from .client import FirestoreAPIError

if TYPE_CHECKING:
    from runboard.domain.model import Category, LeaderboardType, Level, Platform, RunRecord
    from runboard.domain.reconciliation import RunFieldUpdates

    from .client import FirestoreClient

log = getLogger(__name__)

RUNS_COLLECTION: Final[str] = "leaderboardEntries"
CATEGORIES_COLLECTION: Final[str] = "categories"
PLATFORMS_COLLECTION: Final[str] = "platforms"
LEVELS_COLLECTION: Final[str] = "levels"

_UPDATABLE_RUN_FIELDS = ("category", "platform", "level")


class FirestoreReferenceDataRepository:
    """Reads the ``categories``, ``platforms`` and ``levels`` collections."""

    def __init__(self, client: FirestoreClient) -> None:
        self._client = client

    async def get_categories(
        self,
        leaderboard_type: LeaderboardType | None = None,
    ) -> list[Category]:
        categories = [
            parse_category(document.to_data(), document_id=document.document_id)
            async for document in self._client.list_documents(CATEGORIES_COLLECTION)
        ]
        if leaderboard_type is None:
            return categories
        # Legacy documents carry no leaderboardType, so filter after normalisation.
        wanted = normalize_leaderboard_type(leaderboard_type)
        return [category for category in categories if category.leaderboard_type == wanted]

    async def get_platforms(self) -> list[Platform]:
        return [
            parse_platform(document.to_data(), document_id=document.document_id)
            async for document in self._client.list_documents(PLATFORMS_COLLECTION)
        ]

    async def get_levels(self) -> list[Level]:
        return [
            parse_level(document.to_data(), document_id=document.document_id)
            async for document in self._client.list_documents(LEVELS_COLLECTION)
        ]


class FirestoreRunRepository:
    """Reads and patches documents of the ``leaderboardEntries`` collection."""

    def __init__(self, client: FirestoreClient) -> None:
        self._client = client

    async def get_run_by_id(self, run_id: str) -> RunRecord | None:
        document = await self._client.get_document(RUNS_COLLECTION, run_id)
        if document is None:
            return None
        return parse_run(document.to_data(), document_id=document.document_id)

    async def list_unverified_runs(self, *, limit: int | None = None) -> list[RunRecord]:
        query: dict[str, object] = {
            "from": [{"collectionId": RUNS_COLLECTION}],
            "where": {
                "fieldFilter": {
                    "field": {"fieldPath": "verified"},
                    "op": "EQUAL",
                    "value": {"booleanValue": False},
                }
            },
        }
        if limit is not None:
            query["limit"] = limit
        documents = await self._client.run_query(query)
        return [
            parse_run(document.to_data(), document_id=document.document_id)
            for document in documents
        ]

    async def update_leaderboard_entry(self, run_id: str, updates: RunFieldUpdates) -> bool:
        data: dict[str, object] = {
            name: updates[name] for name in _UPDATABLE_RUN_FIELDS if name in updates
        }
        if not data:
            return await self.get_run_by_id(run_id) is not None
        return await self._patch_run(run_id, data)

    async def update_run_verification_status(
        self,
        run_id: str,
        verified: bool,  # noqa: FBT001
        verified_by: str | None = None,
    ) -> bool:
        data: dict[str, object] = {
            "verified": verified,
            "verifiedBy": verified_by if verified else None,
        }
        return await self._patch_run(run_id, data)

    async def _patch_run(self, run_id: str, data: dict[str, object]) -> bool:
        try:
            document = await self._client.patch_document(RUNS_COLLECTION, run_id, data)
        except (FirestoreAPIError, httpx.HTTPError):
            log.exception("Failed to update run %s with %s", run_id, sorted(data))
            return False
        return document is not None
