"""Dry-run reconciliation for moderators reviewing pending runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from runboard.domain.reconciliation import reconcile_run

from .reference_data import fetch_reference_snapshot

if TYPE_CHECKING:
    from collections.abc import Sequence

    from runboard.domain.model import RunRecord
    from runboard.domain.normalization import FieldNormalizers
    from runboard.domain.ports import ReferenceDataSource
    from runboard.domain.reconciliation import ReconciliationResult


@dataclass(slots=True, frozen=True, kw_only=True)
class RunReconciliationPreview:
    run: RunRecord
    result: ReconciliationResult


async def preview_reconciliation(
    runs_to_preview: Sequence[RunRecord],
    *,
    reference_data: ReferenceDataSource,
    normalizers: FieldNormalizers | None = None,
) -> list[RunReconciliationPreview]:
    """Return what verification would change for each persisted run, writing nothing."""

    persisted = [run for run in runs_to_preview if run.id]
    if not persisted:
        return []
    snapshot = await fetch_reference_snapshot(reference_data)
    return [
        RunReconciliationPreview(
            run=run,
            result=reconcile_run(run, snapshot, normalizers=normalizers),
        )
        for run in persisted
    ]
