"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from runboard.adapters.documents import (
    category_from_document,
    level_from_document,
    load_export_bundle,
    platform_from_document,
    run_from_document,
)
from runboard.adapters.firestore import (
    FirestoreClient,
    FirestoreReferenceDataRepository,
    FirestoreRunRepository,
)
from runboard.adapters.sqlalchemy import (
    SqlAlchemyReferenceDataRepository,
    SqlAlchemyRunRepository,
    is_started,
    shutdown,
    startup,
)
from runboard.config import (
    ConfigurationError,
    StorageBackend,
    VerificationConfig,
    get_firestore_config,
    get_verification_config,
)
from runboard.domain.verification import (
    BatchVerificationResult,
    RunReconciliationPreview,
    RunVerificationResult,
    batch_verify_runs,
    preview_reconciliation,
    verify_run,
)

if TYPE_CHECKING:
    from pathlib import Path

    from runboard.domain.ports import ReferenceDataSource, RunRepository
    from runboard.domain.verification import ProgressCallback

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Backend:
    reference_data: ReferenceDataSource
    runs: RunRepository


type BackendFactory = Callable[[VerificationConfig], AbstractAsyncContextManager[Backend]]


@dataclass(slots=True, frozen=True, kw_only=True)
class ImportSummary:
    runs: int = 0
    categories: int = 0
    platforms: int = 0
    levels: int = 0
    skipped_runs: int = 0


@asynccontextmanager
async def open_backend(config: VerificationConfig) -> AsyncIterator[Backend]:
    """Yield repositories for the configured backend and release them afterwards."""

    if config.backend is StorageBackend.FIRESTORE:
        async with FirestoreClient(get_firestore_config()) as client:
            yield Backend(
                reference_data=FirestoreReferenceDataRepository(client),
                runs=FirestoreRunRepository(client),
            )
        return

    started_here = not is_started()
    if started_here:
        await startup()
    try:
        yield Backend(
            reference_data=SqlAlchemyReferenceDataRepository(),
            runs=SqlAlchemyRunRepository(),
        )
    finally:
        if started_here:
            await shutdown()


def verify_pending_runs(
    verified_by: str,
    *,
    batch_size: int | None = None,
    limit: int | None = None,
    on_progress: ProgressCallback | None = None,
    backend_factory: BackendFactory | None = None,
) -> BatchVerificationResult:
    """Reconcile and verify every unverified run (up to ``limit``)."""

    config = get_verification_config()
    effective_batch_size = config.batch_size if batch_size is None else batch_size
    log.info(
        "Starting pending-run verification: backend=%s, batch_size=%s, limit=%s",
        config.backend,
        effective_batch_size,
        limit,
    )

    async def run() -> BatchVerificationResult:
        async with (backend_factory or open_backend)(config) as backend:
            pending = await backend.runs.list_unverified_runs(limit=limit)
            log.info("Found %s unverified runs", len(pending))
            return await batch_verify_runs(
                pending,
                verified_by,
                reference_data=backend.reference_data,
                runs=backend.runs,
                batch_size=effective_batch_size,
                on_progress=on_progress,
            )

    return asyncio.run(run())


def verify_single_run(
    run_id: str,
    verified_by: str | None = None,
    *,
    verified: bool = True,
    backend_factory: BackendFactory | None = None,
) -> RunVerificationResult:
    """Verify (repairing fields first) or un-verify one run."""

    config = get_verification_config()

    async def run() -> RunVerificationResult:
        async with (backend_factory or open_backend)(config) as backend:
            return await verify_run(
                run_id,
                verified,
                verified_by,
                reference_data=backend.reference_data,
                runs=backend.runs,
            )

    result = asyncio.run(run())
    if result.success:
        log.info("Run %s %s", run_id, "verified" if verified else "unverified")
    else:
        log.warning("Run %s not updated: %s", run_id, result.error)
    return result


def preview_pending_runs(
    *,
    limit: int | None = None,
    backend_factory: BackendFactory | None = None,
) -> list[RunReconciliationPreview]:
    """Show the field repairs verification would apply to unverified runs."""

    config = get_verification_config()

    async def run() -> list[RunReconciliationPreview]:
        async with (backend_factory or open_backend)(config) as backend:
            pending = await backend.runs.list_unverified_runs(limit=limit)
            return await preview_reconciliation(pending, reference_data=backend.reference_data)

    return asyncio.run(run())


def import_export(path: Path) -> ImportSummary:
    """Load a JSON export of the leaderboard collections into the SQL store.

    Documents replace stored rows with the same id. Runs without an id cannot
    be addressed later and are skipped.
    """

    config = get_verification_config()
    if config.backend is not StorageBackend.SQLALCHEMY:
        raise ConfigurationError(
            f"Importing requires the {StorageBackend.SQLALCHEMY} backend, "
            f"got {config.backend}"
        )
    bundle = load_export_bundle(path)
    runs = [run_from_document(document) for document in bundle.leaderboard_entries]
    addressable = [run for run in runs if run.id]
    skipped = len(runs) - len(addressable)
    if skipped:
        log.warning("Skipping %s runs without an id", skipped)

    async def run() -> ImportSummary:
        async with open_backend(config):
            reference = SqlAlchemyReferenceDataRepository()
            return ImportSummary(
                categories=await reference.save_categories(
                    category_from_document(document) for document in bundle.categories
                ),
                platforms=await reference.save_platforms(
                    platform_from_document(document) for document in bundle.platforms
                ),
                levels=await reference.save_levels(
                    level_from_document(document) for document in bundle.levels
                ),
                runs=await SqlAlchemyRunRepository().save_runs(addressable),
                skipped_runs=skipped,
            )

    summary = asyncio.run(run())
    log.info(
        "Imported %s: runs=%s, categories=%s, platforms=%s, levels=%s, skipped=%s",
        path,
        summary.runs,
        summary.categories,
        summary.platforms,
        summary.levels,
        summary.skipped_runs,
    )
    return summary
