"""Batch verification of runs with per-run failure isolation.

Flow:
1) fetch the reference snapshot once for the whole call
2) split the runs into consecutive groups of ``batch_size``
3) process each group concurrently, groups strictly one after another
4) per run: reconcile, persist the diff, then mark the run verified

A failing run is recorded in the result and never stops the batch.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from runboard.domain.reconciliation import reconcile_run

from .contracts import (
    BatchVerificationResult,
    VerificationError,
    VerificationStage,
    describe_exception,
)
from .reference_data import fetch_reference_snapshot

if TYPE_CHECKING:
    from collections.abc import Sequence

    from runboard.domain.model import RunRecord
    from runboard.domain.normalization import FieldNormalizers
    from runboard.domain.ports import ReferenceDataSource, RunRepository
    from runboard.domain.reconciliation import ReferenceSnapshot

    from .contracts import ProgressCallback

DEFAULT_BATCH_SIZE: Final[int] = 20

log = getLogger(__name__)


@dataclass(slots=True)
class _BatchProgress:
    """Accumulator shared by the tasks of one call.

    All mutation happens on the event loop thread between awaits, so plain
    increments and appends are safe.
    """

    total: int
    on_progress: ProgressCallback | None = None
    processed: int = 0
    result: BatchVerificationResult = field(default_factory=BatchVerificationResult)

    def succeed(self) -> None:
        self.result.success_count += 1

    def fail(self, *, identifier: str, stage: VerificationStage, message: str) -> None:
        self.result.error_count += 1
        self.result.errors.append(
            VerificationError(identifier=identifier, stage=stage, message=message)
        )
        if stage is not VerificationStage.UNEXPECTED:
            log.warning("Run %s failed at %s: %s", identifier, stage, message)

    def advance(self) -> None:
        self.processed += 1
        if self.on_progress is None:
            return
        try:
            self.on_progress(self.processed, self.total)
        except Exception:
            log.exception("Progress callback failed at %s/%s", self.processed, self.total)


@dataclass(slots=True, frozen=True, kw_only=True)
class _RunVerifier:
    snapshot: ReferenceSnapshot
    runs: RunRepository
    verified_by: str
    normalizers: FieldNormalizers | None
    progress: _BatchProgress

    async def verify(self, run: RunRecord) -> None:
        name = run.display_name
        try:
            await self._verify(run, name)
        except Exception as exc:
            log.exception("Unexpected error verifying run %s", run.id or name)
            self.progress.fail(
                identifier=run.id or name,
                stage=VerificationStage.UNEXPECTED,
                message=f"Error verifying {name}: {describe_exception(exc)}",
            )
        finally:
            self.progress.advance()

    async def _verify(self, run: RunRecord, name: str) -> None:
        if not run.id:
            self.progress.fail(
                identifier=name,
                stage=VerificationStage.MISSING_ID,
                message=f"Run missing ID: {name}",
            )
            return

        reconciled = reconcile_run(run, self.snapshot, normalizers=self.normalizers)
        if reconciled.has_updates:
            updated = await self.runs.update_leaderboard_entry(run.id, reconciled.updates)
            if not updated:
                self.progress.fail(
                    identifier=run.id,
                    stage=VerificationStage.UPDATE,
                    message=f"Failed to update run: {name}",
                )
                return

        verified = await self.runs.update_run_verification_status(
            run.id,
            verified=True,
            verified_by=self.verified_by,
        )
        if verified:
            self.progress.succeed()
            return
        self.progress.fail(
            identifier=run.id,
            stage=VerificationStage.VERIFY,
            message=f"Failed to verify run: {name}",
        )


async def batch_verify_runs(
    runs_to_verify: Sequence[RunRecord],
    verified_by: str,
    *,
    reference_data: ReferenceDataSource,
    runs: RunRepository,
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_progress: ProgressCallback | None = None,
    normalizers: FieldNormalizers | None = None,
) -> BatchVerificationResult:
    """Reconcile and verify ``runs_to_verify``, returning an aggregate summary.

    ``on_progress(processed, total)`` is called once per run; ``processed``
    strictly increases but follows completion order, not input order.
    """

    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    total = len(runs_to_verify)
    progress = _BatchProgress(total=total, on_progress=on_progress)
    if total == 0:
        return progress.result

    log.info("Verifying %s runs in groups of %s (verified_by=%s)", total, batch_size, verified_by)

    try:
        snapshot = await fetch_reference_snapshot(reference_data)
    except Exception as exc:
        log.exception("Could not load reference data; no run was verified")
        message = f"Batch verification error: {describe_exception(exc)}"
        for run in runs_to_verify:
            progress.fail(
                identifier=run.id or run.display_name,
                stage=VerificationStage.REFERENCE_DATA,
                message=message,
            )
            progress.advance()
        return progress.result

    verifier = _RunVerifier(
        snapshot=snapshot,
        runs=runs,
        verified_by=verified_by,
        normalizers=normalizers,
        progress=progress,
    )
    for start in range(0, total, batch_size):
        group = runs_to_verify[start : start + batch_size]
        log.debug("Processing runs %s-%s of %s", start + 1, start + len(group), total)
        async with asyncio.TaskGroup() as task_group:
            for run in group:
                task_group.create_task(verifier.verify(run))

    result = progress.result
    log.info(
        "Finished batch verification: verified=%s, failed=%s, total=%s",
        result.success_count,
        result.error_count,
        total,
    )
    return result
