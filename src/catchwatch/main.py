#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import sys
from datetime import UTC, datetime
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from catchwatch.app import (
    compute_missing_landings,
    load_reference_cache,
    run_landings_and_reporting_job,
    run_reprocessing_batch,
)
from catchwatch.common import configure_logging

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType


def _utc_timestamp(value: str) -> datetime:
    """argparse type for ``--at``; naive timestamps are read as UTC."""
    try:
        dt = datetime.fromisoformat(value.strip().removesuffix("Z"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid ISO-8601 timestamp: {value!r}") from exc
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _run_landings_job(_args: argparse.Namespace) -> int:
    # the job still runs on whatever reference data is already cached
    try:
        load_reference_cache()
    except Exception as e:  # noqa: BLE001
        print(f"Error loading reference data: {e}", file=sys.stderr)
    run_landings_and_reporting_job()
    return 0


def _run_load_cache(_args: argparse.Namespace) -> int:
    try:
        cache = load_reference_cache()
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(
        f"vessels={len(cache.vessels)} species={len(cache.species)} "
        f"conversion_factors={len(cache.conversion_factors)} "
        f"exporter_behaviour={len(cache.exporter_behaviour)}"
    )
    return 0


def _run_reprocess(args: argparse.Namespace) -> int:
    result = run_reprocessing_batch(args.limit)
    print(
        f"read={result.read} selected={result.selected} "
        f"certificates_updated={result.certificates_updated} written={result.written}"
    )
    return 0


def _run_missing_landings(args: argparse.Namespace) -> int:
    load_reference_cache()
    for query in compute_missing_landings(args.at):
        print(f"{query.rss_number}\t{query.date_landed}")
    return 0


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile catch certificate landings against provider data"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    job = commands.add_parser(
        "landings-job",
        help="Load reference data, then run every phase of the landings and reporting job",
    )
    job.set_defaults(handler=_run_landings_job)

    load = commands.add_parser(
        "load-cache", help="Load every reference dataset and report the counts"
    )
    load.set_defaults(handler=_run_load_cache)

    reprocess = commands.add_parser(
        "reprocess", help="Reset queued landings to pending in one bounded batch"
    )
    reprocess.add_argument(
        "--limit",
        type=_positive_int,
        help="Number of queued landings to take (default: LANDING_REPROCESSING_LIMIT)",
    )
    reprocess.set_defaults(handler=_run_reprocess)

    missing = commands.add_parser(
        "missing-landings", help="Print the vessel/date pairs whose landing data is due"
    )
    missing.add_argument(
        "--at",
        type=_utc_timestamp,
        help="ISO-8601 timestamp to evaluate the windows at (default: now)",
    )
    missing.set_defaults(handler=_run_missing_landings)
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
    handler: Callable[[argparse.Namespace], int] = parsed_args.handler

    configure_logging()
    try:
        code = handler(parsed_args)
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if code:
        sys.exit(code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
