"""Moderator verification workflows built on run reconciliation."""

from __future__ import annotations

from .batch import DEFAULT_BATCH_SIZE, batch_verify_runs
from .contracts import (
    BatchVerificationResult,
    ProgressCallback,
    RunVerificationResult,
    VerificationError,
    VerificationStage,
)
from .preview import RunReconciliationPreview, preview_reconciliation
from .reference_data import fetch_reference_snapshot
from .single import prepare_run_for_verification, verify_run

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "BatchVerificationResult",
    "ProgressCallback",
    "RunReconciliationPreview",
    "RunVerificationResult",
    "VerificationError",
    "VerificationStage",
    "batch_verify_runs",
    "fetch_reference_snapshot",
    "prepare_run_for_verification",
    "preview_reconciliation",
    "verify_run",
]
