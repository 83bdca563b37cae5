# src/cli/recipe_diff.py

"""
Command line entry point: compare two recipe dumps.

    recipe-diff [-o OUTPUT] BEFORE [AFTER] [-b KIND] [-w KIND]

-b and -w take one status kind each and may be repeated.

Without AFTER the BEFORE dump is compared against a copy of itself, which
only surfaces conflicts, duplicate registrations and missing stacks.

Exit codes: 0 ok, 1 load/analysis failure, 2 usage error.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from analysis.classifier import analyze
from analysis.report import StatusFilter, apply_filter, print_summary, summarize, write_report
from analysis.status import RecipeStatus, parse_status_list
from recipes.index import build_machine_index
from recipes.loader import load_snapshot_pair
from runtime.config import Settings, load_settings
from runtime.errors import RecipeDiffError, UsageError
from runtime.logging_config import configure_logging

logger = logging.getLogger("recipe_diff")


def build_parser() -> argparse.ArgumentParser:
    kinds = ", ".join(s.value for s in RecipeStatus)
    parser = argparse.ArgumentParser(
        prog="recipe-diff",
        description="Classify GregTech recipe changes between two recipe dumps.",
        epilog=f"Status kinds: {kinds}",
    )
    parser.add_argument("before", type=Path, help="Path to a recipe dump prior to your changes")
    parser.add_argument(
        "after",
        type=Path,
        nargs="?",
        default=None,
        help="Path to a recipe dump after your changes. "
        "If this isn't set, only conflict analysis is run.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Report path (default: config 'output', else analysis.json)",
    )
    parser.add_argument(
        "-b",
        "--blacklist",
        action="append",
        default=None,
        metavar="KIND",
        help="Drop this status kind from the report (repeatable)",
    )
    parser.add_argument(
        "-w",
        "--whitelist",
        action="append",
        default=None,
        metavar="KIND",
        help="Only keep this status kind in the report (repeatable)",
    )
    parser.add_argument("-c", "--config", type=Path, default=None, help="YAML config file")
    parser.add_argument(
        "--include-removed-machines",
        action="store_true",
        default=None,
        help="Also report machines that no longer exist in AFTER",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Load BEFORE and AFTER one after the other instead of in parallel",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    """
    Config file defaults overridden by command line flags.

    A filter given on the command line replaces both config filter lists.
    """
    settings = load_settings(args.config)
    if args.blacklist or args.whitelist:
        settings = settings.with_overrides(
            blacklist=args.blacklist or [],
            whitelist=args.whitelist or [],
        )
    return settings.with_overrides(
        output=args.output,
        include_removed_machines=args.include_removed_machines,
        parallel_load=False if args.sequential else None,
        log_level="debug" if args.verbose else None,
    )


def build_filter(blacklist: Sequence[str], whitelist: Sequence[str]) -> StatusFilter:
    """Parse status names and build the filter; raises UsageError."""
    if blacklist and whitelist:
        raise UsageError("cannot use --blacklist and --whitelist at the same time")
    return StatusFilter.from_lists(
        blacklist=parse_status_list(blacklist),
        whitelist=parse_status_list(whitelist),
    )


def run(args: argparse.Namespace) -> None:
    """Run one analysis; raises RecipeDiffError subclasses on failure."""
    # Contradictory filters are rejected before anything is read.
    if args.blacklist and args.whitelist:
        raise UsageError("cannot use --blacklist and --whitelist at the same time")

    settings = resolve_settings(args)
    status_filter = build_filter(settings.blacklist, settings.whitelist)
    configure_logging(settings.log_level)

    before, after = load_snapshot_pair(args.before, args.after, parallel=settings.parallel_load)

    logger.info("finding gt recipes")
    before_index = build_machine_index(before)
    after_index = build_machine_index(after)

    logger.info("analyzing recipes")
    result = analyze(
        before_index,
        after_index,
        include_removed_machines=settings.include_removed_machines,
    )
    result = apply_filter(result, status_filter)

    print_summary(summarize(result))

    logger.info("writing %s", settings.output)
    write_report(result, settings.output, indent=settings.json_indent)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    # Flags may sit between BEFORE and AFTER.
    args = parser.parse_intermixed_args(argv)

    configure_logging(logging.INFO)

    try:
        run(args)
    except UsageError as exc:
        logger.error("%s", exc)
        return 2
    except RecipeDiffError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
