"""Result and callback contracts for run verification workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol


class VerificationStage(StrEnum):
    """Step of the per-run workflow at which a failure was recorded."""

    MISSING_ID = "missing-id"
    REFERENCE_DATA = "reference-data"
    UPDATE = "update"
    VERIFY = "verify"
    UNEXPECTED = "unexpected"


@dataclass(slots=True, frozen=True, kw_only=True)
class VerificationError:
    """One recorded failure.

    ``identifier`` is the run id, or the player's display name for runs that
    were never persisted. ``message`` is the moderator-facing text.
    """

    identifier: str
    stage: VerificationStage
    message: str


@dataclass(slots=True, kw_only=True)
class BatchVerificationResult:
    """Aggregate outcome of a batch verification.

    ``errors`` keeps the order in which failures were recorded; identical
    messages are not merged.
    """

    success_count: int = 0
    error_count: int = 0
    errors: list[VerificationError] = field(default_factory=list[VerificationError])

    @property
    def processed(self) -> int:
        return self.success_count + self.error_count

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]


@dataclass(slots=True, frozen=True, kw_only=True)
class RunVerificationResult:
    """Outcome of verifying or un-verifying a single run."""

    success: bool
    autofilled: bool = False
    error: str | None = None


class ProgressCallback(Protocol):
    """Called once per processed run with the running and total counts."""

    def __call__(self, processed: int, total: int) -> None: ...


def describe_exception(exc: BaseException) -> str:
    """Moderator-facing details for an unexpected failure."""

    return str(exc) or type(exc).__name__
