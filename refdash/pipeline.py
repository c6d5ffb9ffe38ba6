"""End-to-end dashboard for The Rust Reference."""

from __future__ import annotations

from time import perf_counter

from refdash.annotate import UNWIND_FIXUPS, preprocess_examples
from refdash.config import DashboardConfig
from refdash.extract import extract_examples
from refdash.hierarchy import parse_hierarchy
from refdash.log_parser import parse_log
from refdash.logging import get_logger
from refdash.runner import run_examples
from refdash.tree import ResultTree

logger = get_logger(__name__)


def build_reference_dashboard(config: DashboardConfig) -> ResultTree:
    """Extract, annotate and run the manual's examples and collect the results.

    Stages run strictly one after another; any exception aborts the run.

    Returns:
        Result tree rooted at ``config.root_name``.
    """
    start = perf_counter()

    logger.info(f"Resolving hierarchy from {config.summary_path}")
    hierarchy = parse_hierarchy(
        config.summary_path,
        title=config.summary_title,
        root=config.root_segments,
    )

    examples = extract_examples(hierarchy, config)

    fixups = UNWIND_FIXUPS | frozenset(config.extra_unwind_fixups)
    preprocess_examples(examples, config.test_root, fixups)

    run_examples(config.suite, config.log_path, x_py=config.x_py)

    tree = parse_log(
        config.log_path, root=config.root_name, separator=config.log_separator
    )
    logger.info(f"Dashboard built in {perf_counter() - start:.2f} s")
    return tree
