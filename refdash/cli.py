"""Command-line interface for refdash."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from time import perf_counter
from typing import List, Optional

from refdash.config import DashboardConfig, load_config
from refdash.hierarchy import parse_hierarchy
from refdash.log_parser import DEFAULT_SEPARATOR, parse_log
from refdash.logging import get_logger, level_for_flags, set_global_log_level
from refdash.pipeline import build_reference_dashboard
from refdash.render import display_dashboard, write_results_json
from refdash.tree import ResultTree

logger = get_logger(__name__)


def _format_duration(seconds: float) -> str:
    """Return a concise human-readable duration string.

    Examples:
        0.123 -> "123.0 ms"; 1.234 -> "1.23 s"; 75.2 -> "1m 15.2s".
    """
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    if seconds < 60.0:
        return f"{seconds:.2f} s"
    minutes = int(seconds // 60)
    rem = seconds - minutes * 60
    return f"{minutes}m {rem:.1f}s"


def _show(tree: ResultTree, results: Optional[Path], max_depth: Optional[int]) -> None:
    display_dashboard(tree, max_depth=max_depth)
    if results is not None:
        write_results_json(tree, results)
        print(f"✅ Results written to: {results}")


def _run(
    config_path: Optional[Path], results: Optional[Path], max_depth: Optional[int]
) -> None:
    """Run the full pipeline and display the dashboard."""
    start = perf_counter()
    try:
        if config_path is not None:
            config = load_config(config_path)
        else:
            config = DashboardConfig.from_env()
        tree = build_reference_dashboard(config)
        _show(tree, results, max_depth)
        elapsed = _format_duration(perf_counter() - start)
        logger.info(f"Dashboard run completed in {elapsed}")
    except Exception as e:
        logger.error(f"Failed to build dashboard: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to build dashboard: {type(e).__name__}: {e}")
        sys.exit(1)


def _report(
    log_path: Path,
    root: str,
    separator: str,
    results: Optional[Path],
    max_depth: Optional[int],
) -> None:
    """Render the dashboard of an existing compiletest log."""
    try:
        tree = parse_log(log_path, root=root, separator=separator)
        _show(tree, results, max_depth)
    except FileNotFoundError:
        logger.error(f"Log file not found: {log_path}")
        print(f"❌ ERROR: Log file not found: {log_path}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to parse log: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to parse log: {type(e).__name__}: {e}")
        sys.exit(1)


def _hierarchy(summary_path: Path, title: str, root: str) -> None:
    """Print the hierarchy resolved for each markdown file."""
    try:
        hierarchy = parse_hierarchy(summary_path, title=title, root=(root,))
    except FileNotFoundError:
        logger.error(f"Summary file not found: {summary_path}")
        print(f"❌ ERROR: Summary file not found: {summary_path}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid summary file: {e}")
        print(f"❌ ERROR: Invalid summary file: {e}")
        sys.exit(1)
    for source, segments in sorted(hierarchy.items()):
        print(f"{source} -> {'/'.join(segments)}")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``refdash`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="refdash",
        description="Run the examples of The Rust Reference and summarize results.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Suppress console output (logs only)"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{run,report,hierarchy}",
        help="Available commands",
    )

    run_parser = subparsers.add_parser(
        "run", help="Extract, run and summarize all examples"
    )
    run_parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="YAML file overriding the default configuration",
    )

    report_parser = subparsers.add_parser(
        "report", help="Summarize an existing compiletest log"
    )
    report_parser.add_argument("log", type=Path, help="Path to the compiletest log")
    report_parser.add_argument(
        "--root", default="ref", help="Name of the root node (default: ref)"
    )
    report_parser.add_argument(
        "--separator",
        default=DEFAULT_SEPARATOR,
        help="Separator between result and test path (default: ' [rmc] ')",
    )

    for p in (run_parser, report_parser):
        p.add_argument(
            "--results",
            "-r",
            type=Path,
            default=None,
            help="Also export the result tree to this JSON file",
        )
        p.add_argument(
            "--max-depth",
            type=int,
            default=None,
            help="Limit the displayed tree depth (root is 0)",
        )

    hierarchy_parser = subparsers.add_parser(
        "hierarchy", help="Show the chapter hierarchy of each markdown file"
    )
    hierarchy_parser.add_argument(
        "summary",
        type=Path,
        nargs="?",
        default=DashboardConfig.summary_path,
        help="Path to SUMMARY.md",
    )
    hierarchy_parser.add_argument(
        "--title",
        default=DashboardConfig.summary_title,
        help="Title the summary starts with",
    )
    hierarchy_parser.add_argument(
        "--root", default="ref", help="Name of the root segment (default: ref)"
    )

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    set_global_log_level(level_for_flags(args.verbose, args.quiet))
    if args.verbose:
        logger.debug("Debug logging enabled")

    if args.command == "run":
        _run(args.config, args.results, args.max_depth)
    elif args.command == "report":
        _report(args.log, args.root, args.separator, args.results, args.max_depth)
    elif args.command == "hierarchy":
        _hierarchy(args.summary, args.title, args.root)


if __name__ == "__main__":
    main()
