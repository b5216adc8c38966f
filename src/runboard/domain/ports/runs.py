"""Persistence contract for run records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from runboard.domain.model import RunRecord
    from runboard.domain.reconciliation import RunFieldUpdates


@runtime_checkable
class RunRepository(Protocol):
    """Storage operations the verification workflow depends on.

    Write operations report business failures (unknown run, rejected write)
    through their boolean result rather than by raising.
    """

    async def get_run_by_id(self, run_id: str) -> RunRecord | None: ...

    async def list_unverified_runs(self, *, limit: int | None = None) -> list[RunRecord]: ...

    async def update_leaderboard_entry(self, run_id: str, updates: RunFieldUpdates) -> bool: ...

    async def update_run_verification_status(
        self,
        run_id: str,
        verified: bool,  # noqa: FBT001
        verified_by: str | None = None,
    ) -> bool: ...
