from __future__ import annotations

import logging
from pathlib import Path

import pytest

from runboard.app import ImportSummary
from runboard.config import ConfigurationError
from runboard.domain.reconciliation import ReconciliationResult
from runboard.domain.verification import (
    BatchVerificationResult,
    RunReconciliationPreview,
    RunVerificationResult,
    VerificationError,
    VerificationStage,
)
from runboard.ui import cli
from tests.helpers.runs import make_run


def _run_main(argv: list[str]) -> int | str | None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    return excinfo.value.code


def test_verify_pending_passes_arguments(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    captured: dict[str, object] = {}

    def fake_verify(verified_by: str, **kwargs: object) -> BatchVerificationResult:
        captured["verified_by"] = verified_by
        captured.update(kwargs)
        return BatchVerificationResult(success_count=3)

    monkeypatch.setattr(cli, "verify_pending_runs", fake_verify)

    code = _run_main(["verify-pending", "--verified-by", "mod-1", "--batch-size", "5"])

    assert code == 0
    assert captured["verified_by"] == "mod-1"
    assert captured["batch_size"] == 5
    assert captured["limit"] is None
    assert callable(captured["on_progress"])
    assert "Verified 3 run(s), 0 failed" in capsys.readouterr().out


def test_verify_pending_exits_with_one_when_any_run_fails(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    error = VerificationError(
        identifier="run-2",
        stage=VerificationStage.VERIFY,
        message="Failed to verify run: Bob",
    )

    def fake_verify(*_: object, **__: object) -> BatchVerificationResult:
        return BatchVerificationResult(success_count=1, error_count=1, errors=[error])

    monkeypatch.setattr(cli, "verify_pending_runs", fake_verify)

    code = _run_main(["verify-pending", "--verified-by", "mod-1"])

    assert code == 1
    assert "[verify] run-2: Failed to verify run: Bob" in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv",
    [
        ["verify-pending"],
        ["verify-pending", "--verified-by", "mod-1", "--batch-size", "0"],
        ["preview", "--limit", "abc"],
        ["verify", "run-1"],
    ],
)
def test_invalid_arguments_exit_with_two(argv: list[str]) -> None:
    assert _run_main(argv) == 2


def test_configuration_errors_exit_with_two(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_preview(**_: object) -> list[RunReconciliationPreview]:
        raise ConfigurationError("RUNBOARD_BACKEND must be one of sqlalchemy, firestore")

    monkeypatch.setattr(cli, "preview_pending_runs", fake_preview)

    assert _run_main(["preview"]) == 2


def test_runtime_errors_exit_with_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_verify(*_: object, **__: object) -> BatchVerificationResult:
        raise RuntimeError("database locked")

    monkeypatch.setattr(cli, "verify_pending_runs", fake_verify)

    assert _run_main(["verify-pending", "--verified-by", "mod-1"]) == 1


def test_verify_and_unverify_single_run(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    calls: list[tuple[str, str | None, bool]] = []

    def fake_single(
        run_id: str,
        verified_by: str | None = None,
        *,
        verified: bool = True,
    ) -> RunVerificationResult:
        calls.append((run_id, verified_by, verified))
        return RunVerificationResult(success=True, autofilled=verified)

    monkeypatch.setattr(cli, "verify_single_run", fake_single)

    assert _run_main(["verify", "run-1", "--verified-by", "mod-1"]) == 0
    assert _run_main(["unverify", "run-1"]) == 0

    assert calls == [("run-1", "mod-1", True), ("run-1", None, False)]
    output = capsys.readouterr().out
    assert "Run run-1 verified (fields repaired)" in output
    assert "Run run-1 unverified" in output


def test_single_run_failure_exits_with_one(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    def fake_single(*_: object, **__: object) -> RunVerificationResult:
        return RunVerificationResult(success=False, error="Run not found")

    monkeypatch.setattr(cli, "verify_single_run", fake_single)

    assert _run_main(["verify", "ghost", "--verified-by", "mod-1"]) == 1
    assert "Error: Run not found" in capsys.readouterr().err


def test_preview_prints_changes(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    previews = [
        RunReconciliationPreview(
            run=make_run("run-1", player_name="Alice"),
            result=ReconciliationResult(
                category="c-any",
                platform="",
                level="",
                updates={"category": "c-any"},
            ),
        ),
        RunReconciliationPreview(
            run=make_run("run-2", player_name="Bob"),
            result=ReconciliationResult(category="c-100", platform="p-pc", level=""),
        ),
    ]
    monkeypatch.setattr(cli, "preview_pending_runs", lambda **_: previews)

    assert _run_main(["preview", "--limit", "2"]) == 0

    output = capsys.readouterr().out
    assert "run-1 (Alice): category='c-any'" in output
    assert "run-2 (Bob): no changes" in output


def test_import_reports_summary(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    paths: list[Path] = []

    def fake_import(path: Path) -> ImportSummary:
        paths.append(path)
        return ImportSummary(runs=3, categories=2, platforms=1, levels=0, skipped_runs=1)

    monkeypatch.setattr(cli, "import_export", fake_import)

    assert _run_main(["import", "export.json"]) == 0

    assert paths == [Path("export.json")]
    assert "Imported 3 run(s), 2 categories, 1 platforms, 0 levels" in capsys.readouterr().out


def test_progress_line_ends_after_last_run(capsys: pytest.CaptureFixture[str]) -> None:
    cli._print_progress(1, 2)
    cli._print_progress(2, 2)

    assert capsys.readouterr().out == "\rProcessed 1/2\rProcessed 2/2\n"


def test_verbose_flag_configures_debug_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    levels: list[int] = []

    def fake_configure(*, level: int, force: bool = False) -> None:
        del force
        levels.append(level)

    monkeypatch.setattr(cli, "configure_logging", fake_configure)
    monkeypatch.setattr(cli, "preview_pending_runs", lambda **_: [])

    assert _run_main(["-v", "preview"]) == 0
    assert _run_main(["preview"]) == 0

    assert levels == [logging.DEBUG, logging.INFO]
