from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from runboard.app import (
    Backend,
    import_export,
    preview_pending_runs,
    verify_pending_runs,
    verify_single_run,
)
from runboard.config import ConfigurationError, VerificationConfig
from tests.helpers.runs import FakeReferenceDataSource, FakeRunRepository, make_run, make_runs

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable
    from contextlib import AbstractAsyncContextManager

EXPORT_PATH = Path("tests/data/leaderboard_export.json")


def _fake_backend(
    reference_data: FakeReferenceDataSource,
    runs: FakeRunRepository,
) -> Callable[[VerificationConfig], AbstractAsyncContextManager[Backend]]:
    @asynccontextmanager
    async def factory(_config: VerificationConfig) -> AsyncIterator[Backend]:
        yield Backend(reference_data=reference_data, runs=runs)

    return factory


@pytest.fixture
def sqlite_database(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    path = tmp_path / "app.db"
    monkeypatch.setenv("DATABASE_URI", f"sqlite+aiosqlite:///{path}")
    return path


def test_verify_pending_runs_uses_configured_batch_size(
    monkeypatch: pytest.MonkeyPatch,
    reference_data: FakeReferenceDataSource,
) -> None:
    monkeypatch.setenv("RUNBOARD_VERIFY_BATCH_SIZE", "4")
    repository = FakeRunRepository.with_runs([*make_runs(10), make_run("done", verified=True)])
    progress: list[int] = []

    result = verify_pending_runs(
        "mod-1",
        on_progress=lambda processed, _total: progress.append(processed),
        backend_factory=_fake_backend(reference_data, repository),
    )

    assert result.success_count == 10
    assert repository.max_in_flight == 4
    assert progress == list(range(1, 11))
    assert "done" not in repository.verified_ids


def test_verify_pending_runs_honours_limit_and_explicit_batch_size(
    reference_data: FakeReferenceDataSource,
) -> None:
    repository = FakeRunRepository.with_runs(make_runs(10))

    result = verify_pending_runs(
        "mod-1",
        batch_size=2,
        limit=5,
        backend_factory=_fake_backend(reference_data, repository),
    )

    assert result.success_count == 5
    assert repository.max_in_flight == 2


def test_verify_pending_runs_rejects_explicit_zero_batch_size(
    monkeypatch: pytest.MonkeyPatch,
    reference_data: FakeReferenceDataSource,
) -> None:
    monkeypatch.setenv("RUNBOARD_VERIFY_BATCH_SIZE", "4")
    repository = FakeRunRepository.with_runs(make_runs(3))

    with pytest.raises(ValueError, match="batch_size"):
        verify_pending_runs(
            "mod-1",
            batch_size=0,
            backend_factory=_fake_backend(reference_data, repository),
        )

    assert repository.verified_ids == []


def test_verify_single_run_forwards_status(reference_data: FakeReferenceDataSource) -> None:
    run = make_run("run-1", src_category_name="Any%")
    repository = FakeRunRepository.with_runs([run])
    factory = _fake_backend(reference_data, repository)

    verified = verify_single_run("run-1", "mod-1", backend_factory=factory)
    unverified = verify_single_run("run-1", verified=False, backend_factory=factory)

    assert verified.success
    assert verified.autofilled
    assert unverified.success
    assert repository.status_updates == [("run-1", True, "mod-1"), ("run-1", False, None)]


def test_end_to_end_with_sqlalchemy_backend(sqlite_database: Path) -> None:
    summary = import_export(EXPORT_PATH)

    assert sqlite_database.exists()
    assert (summary.runs, summary.categories, summary.platforms, summary.levels) == (3, 3, 2, 2)
    assert summary.skipped_runs == 1

    previews = {preview.run.id: preview.result.updates for preview in preview_pending_runs()}
    assert previews == {
        "run-1": {"category": "c-any"},
        "run-2": {"platform": "p-pc", "level": "l-1"},
    }

    result = verify_pending_runs("mod-1")
    assert (result.success_count, result.error_count) == (2, 0)
    assert preview_pending_runs() == []

    unverified = verify_single_run("run-3", verified=False)
    assert unverified.success
    remaining = preview_pending_runs()
    assert [(preview.run.id, preview.result.updates) for preview in remaining] == [
        ("run-3", {"level": ""}),
    ]


@pytest.mark.usefixtures("sqlite_database")
def test_verify_single_run_reports_missing_run() -> None:
    result = verify_single_run("ghost", "mod-1")

    assert not result.success
    assert result.error == "Run not found"


def test_import_requires_sqlalchemy_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RUNBOARD_BACKEND", "firestore")

    with pytest.raises(ConfigurationError, match="sqlalchemy"):
        import_export(EXPORT_PATH)
