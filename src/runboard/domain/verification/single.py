"""Verification of a single run outside of a batch."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from runboard.domain.reconciliation import reconcile_run

from .contracts import RunVerificationResult, describe_exception
from .reference_data import fetch_reference_snapshot

if TYPE_CHECKING:
    from runboard.domain.model import RunRecord
    from runboard.domain.normalization import FieldNormalizers
    from runboard.domain.ports import ReferenceDataSource, RunRepository
    from runboard.domain.reconciliation import ReconciliationResult

log = getLogger(__name__)


async def prepare_run_for_verification(
    run: RunRecord,
    *,
    reference_data: ReferenceDataSource,
    normalizers: FieldNormalizers | None = None,
) -> ReconciliationResult:
    """Reconcile ``run`` against freshly fetched reference data."""

    snapshot = await fetch_reference_snapshot(reference_data)
    return reconcile_run(run, snapshot, normalizers=normalizers)


async def verify_run(
    run_id: str,
    verified: bool,  # noqa: FBT001
    verified_by: str | None,
    *,
    reference_data: ReferenceDataSource,
    runs: RunRepository,
    normalizers: FieldNormalizers | None = None,
) -> RunVerificationResult:
    """Set the verification status of one run.

    Verifying first repairs the run's reference fields and persists the diff.
    Removing verification only flips the status and never touches the fields.
    Failures are reported in the result instead of being raised.
    """

    try:
        run = await runs.get_run_by_id(run_id)
        if run is None:
            return RunVerificationResult(success=False, error="Run not found")

        if not verified:
            success = await runs.update_run_verification_status(
                run_id,
                verified=False,
                verified_by=verified_by,
            )
            return RunVerificationResult(
                success=success,
                error=None if success else f"Failed to unverify run: {run.display_name}",
            )

        reconciled = await prepare_run_for_verification(
            run,
            reference_data=reference_data,
            normalizers=normalizers,
        )
        if reconciled.has_updates:
            updated = await runs.update_leaderboard_entry(run_id, reconciled.updates)
            if not updated:
                return RunVerificationResult(
                    success=False,
                    error=f"Failed to update run: {run.display_name}",
                )

        success = await runs.update_run_verification_status(
            run_id,
            verified=True,
            verified_by=verified_by,
        )
        return RunVerificationResult(
            success=success,
            autofilled=reconciled.has_updates,
            error=None if success else f"Failed to verify run: {run.display_name}",
        )
    except Exception as exc:
        log.exception("Error setting verification status of run %s", run_id)
        return RunVerificationResult(success=False, error=describe_exception(exc))
