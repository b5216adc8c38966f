"""Reconciliation of run records against canonical reference tables.

Flow for one record:
1) normalize the raw identifier fields and the leaderboard type
2) drop identifiers missing from the snapshot or scoped to another leaderboard type
3) fill blank identifiers by matching imported speedrun.com names
4) diff the repaired fields against the normalized originals
"""

from __future__ import annotations

from .engine import ReconciliationResult, RunFieldUpdates, reconcile_run
from .snapshot import ReferenceSnapshot

__all__ = [
    "ReconciliationResult",
    "ReferenceSnapshot",
    "RunFieldUpdates",
    "reconcile_run",
]
