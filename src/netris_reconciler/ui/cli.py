from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from netris_reconciler.app import build_runtime, download_partition, reconcile_once, run_forever
from netris_reconciler.config import configure_logging
from netris_reconciler.domain.model import EntityKind, ResourceKind

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile Kubernetes resources against Netris")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log remote payloads and field differences",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Reconcile desired resources and their twins")
    run.add_argument(
        "--once",
        action="store_true",
        help="Sweep every resource a single time and exit",
    )
    run.add_argument(
        "--kind",
        dest="kinds",
        action="append",
        choices=[str(kind) for kind in ResourceKind],
        help="Restrict the sweep to this kind (repeatable, defaults to all)",
    )
    run.add_argument(
        "--interval",
        type=float,
        help="Seconds between sweeps (defaults to NOPERATOR_REQUEUE_INTERVAL)",
    )

    cache = subparsers.add_parser("cache", help="Print one resolution cache partition")
    cache.add_argument(
        "kind",
        choices=[str(kind) for kind in EntityKind],
        help="Remote entity list to download",
    )

    return parser.parse_args(list(argv))


def _selected_kinds(args: argparse.Namespace) -> list[ResourceKind] | None:
    if not args.kinds:
        return None
    return [ResourceKind(kind) for kind in args.kinds]


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "run":
            if parsed_args.interval is not None and parsed_args.interval <= 0:
                raise ValueError("Interval must be positive")  # noqa: TRY301
            runtime = build_runtime()
            kinds = _selected_kinds(parsed_args)
            if parsed_args.once:
                result = reconcile_once(runtime, kinds=kinds)
                if result.errors:
                    sys.exit(1)
            else:
                run_forever(runtime, kinds=kinds, interval=parsed_args.interval)
        elif parsed_args.command == "cache":
            for entry in download_partition(EntityKind(parsed_args.kind)):
                print(f"{entry.id}\t{entry.name}")  # noqa: T201
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during reconcile")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
