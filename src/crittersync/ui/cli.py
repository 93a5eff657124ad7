# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
import threading
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from crittersync.app import diff_critter_categories, diff_critters
from crittersync.common.logging import configure_logging, verbosity_to_level
from crittersync.common.text import title_case
from crittersync.config import ConfigurationError, get_reconcile_options, load_overrides
from crittersync.domain.reconciliation import (
    CreateNewCategory,
    NoOp,
    Reassign,
    RenameAndReuse,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from crittersync.domain.reconciliation import (
        CritterNameUpdate,
        Diagnostic,
        PlanEntry,
        ReconciliationReport,
    )

log = logging.getLogger(__name__)

_STOP = threading.Event()


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Verbose mode (-v for debug output)",
    )
    common.add_argument(
        "-d",
        "--database",
        type=Path,
        help="Path to the MacDive database file (defaults to the MacDive data directory)",
    )
    common.add_argument(
        "--apply",
        action="store_true",
        help="Write the computed changes to the database instead of only printing them",
    )
    common.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum number of concurrent taxon lookups (defaults to config)",
    )

    parser = argparse.ArgumentParser(description="Reconcile MacDive critters with iNaturalist")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "critters",
        parents=[common],
        help="Compare critter common and scientific names",
    )
    categories = subparsers.add_parser(
        "categories",
        parents=[common],
        help="Reconcile critter categories with taxonomic groups",
    )
    categories.add_argument(
        "-o",
        "--overrides",
        type=Path,
        help="YAML file with critter category overrides",
    )
    categories.add_argument(
        "--no-reuse-for-unassigned",
        dest="reuse_for_unassigned",
        action="store_const",
        const=False,
        default=None,
        help="Give critters without a category a new category instead of recycling one",
    )

    return parser.parse_args(list(argv))


def format_entry(entry: PlanEntry) -> str:
    critter = f"{entry.critter.name!r} ({entry.critter.species})"
    if isinstance(entry, NoOp):
        return f"Unchanged: {critter}: {entry.category.name}"
    if isinstance(entry, Reassign):
        source = entry.from_category.name if entry.from_category is not None else "---"
        return f"Re-assigning: {critter}: {source} => {entry.to_category.name}"
    if isinstance(entry, RenameAndReuse):
        return (
            f"Renaming category {entry.old_name!r} => {title_case(entry.new_name)!r} "
            f"and re-assigning {critter}"
        )
    if isinstance(entry, CreateNewCategory):
        return f"New category required for {critter}: {title_case(entry.desired_name)}"
    raise TypeError(f"Unsupported plan entry: {entry!r}")


def format_name_update(update: CritterNameUpdate) -> str:
    parts = [f"critter {update.critter_id}:"]
    if update.scientific_name is not None:
        parts.append(f"scientific name => {update.scientific_name}")
    if update.common_name is not None:
        parts.append(f"common name => {update.common_name}")
    return " ".join(parts)


def format_diagnostic(diagnostic: Diagnostic) -> str:
    species = f" ({diagnostic.species})" if diagnostic.species else ""
    return f"[{diagnostic.kind}] critter {diagnostic.critter_id}{species}: {diagnostic.message}"


def _print_category_report(report: ReconciliationReport, *, verbose: bool) -> None:
    for entry in report.entries:
        if verbose or not isinstance(entry, NoOp):
            print(format_entry(entry))
    for diagnostic in report.diagnostics:
        print(format_diagnostic(diagnostic), file=sys.stderr)
    if report.extraneous:
        names = ", ".join(category.name for category in report.extraneous)
        print(f"Extraneous categories: {names}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=verbosity_to_level(parsed_args.verbose), force=True)
        options = get_reconcile_options(
            max_concurrency=parsed_args.concurrency,
            reuse_for_unassigned=getattr(parsed_args, "reuse_for_unassigned", None),
        )
        overrides = (
            load_overrides(parsed_args.overrides) if parsed_args.command == "categories" else None
        )
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "categories":
            result = diff_critter_categories(
                database=parsed_args.database,
                overrides=overrides,
                apply=parsed_args.apply,
                options=options,
                should_stop=_STOP.is_set,
            )
            _print_category_report(result.report, verbose=parsed_args.verbose > 0)
            failed = [item for item in result.executed if not item.succeeded]
        elif parsed_args.command == "critters":
            names = diff_critters(
                database=parsed_args.database,
                apply=parsed_args.apply,
                options=options,
                should_stop=_STOP.is_set,
            )
            for update in names.report.updates:
                print(format_name_update(update))
            for diagnostic in names.report.diagnostics:
                print(format_diagnostic(diagnostic), file=sys.stderr)
            failed = [item for item in names.executed if not item.succeeded]
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during reconciliation")
        sys.exit(1)

    if failed:
        log.error("%d changes could not be applied", len(failed))
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Stop at the next critter on Ctrl+C; quit on the second one."""
    if _STOP.is_set():
        log.info("Closed by user (Ctrl+C)")
        sys.exit(0)
    log.info("Stopping after the current critter (Ctrl+C again to quit)")
    _STOP.set()


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
