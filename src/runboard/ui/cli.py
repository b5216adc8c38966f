# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from runboard.app import (
    import_export,
    preview_pending_runs,
    verify_pending_runs,
    verify_single_run,
)
from runboard.config import ConfigurationError, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from runboard.domain.verification import BatchVerificationResult, RunReconciliationPreview

log = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"must be positive, got {parsed}")
    return parsed


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Verify and repair leaderboard runs")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log adapter traffic and per-group progress",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    pending = subparsers.add_parser(
        "verify-pending",
        help="Repair and verify every unverified run",
    )
    pending.add_argument(
        "--verified-by",
        type=str,
        required=True,
        help="Moderator id recorded on each verified run",
    )
    pending.add_argument(
        "--batch-size",
        type=_positive_int,
        default=None,
        help="Number of runs processed concurrently (defaults to config)",
    )
    pending.add_argument(
        "--limit",
        type=_positive_int,
        help="Maximum number of unverified runs to process",
    )

    verify = subparsers.add_parser("verify", help="Repair and verify a single run")
    verify.add_argument("run_id", type=str, help="Id of the run to verify")
    verify.add_argument(
        "--verified-by",
        type=str,
        required=True,
        help="Moderator id recorded on the run",
    )

    unverify = subparsers.add_parser("unverify", help="Remove verification from a run")
    unverify.add_argument("run_id", type=str, help="Id of the run to unverify")

    preview = subparsers.add_parser(
        "preview",
        help="Show the repairs verification would apply, without writing",
    )
    preview.add_argument(
        "--limit",
        type=_positive_int,
        help="Maximum number of unverified runs to inspect",
    )

    import_parser = subparsers.add_parser(
        "import",
        help="Load a JSON export of the leaderboard collections into the SQL store",
    )
    import_parser.add_argument("path", type=Path, help="Path to the JSON export")

    return parser.parse_args(list(argv))


def _print_progress(processed: int, total: int) -> None:
    print(f"\rProcessed {processed}/{total}", end="" if processed < total else "\n", flush=True)


def _report_batch(result: BatchVerificationResult) -> None:
    print(f"Verified {result.success_count} run(s), {result.error_count} failed")
    for error in result.errors:
        print(f"  [{error.stage}] {error.identifier}: {error.message}")


def _report_previews(previews: Sequence[RunReconciliationPreview]) -> None:
    if not previews:
        print("No unverified runs")
        return
    for preview in previews:
        updates = preview.result.updates
        if not updates:
            print(f"{preview.run.id} ({preview.run.display_name}): no changes")
            continue
        changes = ", ".join(f"{field}={value!r}" for field, value in updates.items())
        print(f"{preview.run.id} ({preview.run.display_name}): {changes}")


def _execute(args: argparse.Namespace) -> int:
    if args.command == "verify-pending":
        result = verify_pending_runs(
            args.verified_by,
            batch_size=args.batch_size,
            limit=args.limit,
            on_progress=_print_progress,
        )
        _report_batch(result)
        return 1 if result.error_count else 0

    if args.command in {"verify", "unverify"}:
        verified = args.command == "verify"
        outcome = verify_single_run(
            args.run_id,
            getattr(args, "verified_by", None),
            verified=verified,
        )
        if not outcome.success:
            print(f"Error: {outcome.error}", file=sys.stderr)
            return 1
        suffix = " (fields repaired)" if outcome.autofilled else ""
        print(f"Run {args.run_id} {'verified' if verified else 'unverified'}{suffix}")
        return 0

    if args.command == "preview":
        _report_previews(preview_pending_runs(limit=args.limit))
        return 0

    if args.command == "import":
        summary = import_export(args.path)
        print(
            f"Imported {summary.runs} run(s), {summary.categories} categories, "
            f"{summary.platforms} platforms, {summary.levels} levels "
            f"({summary.skipped_runs} run(s) skipped)"
        )
        return 0

    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        exit_code = _execute(parsed_args)
    except ConfigurationError as exc:
        log.error("Invalid configuration: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)
    except Exception as exc:
        log.exception("Fatal error during %s", parsed_args.command)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point: load ``.env`` and handle Ctrl+C."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
