"""refdash: Dashboard for the code examples of The Rust Reference.

Extracts every example from the manual, runs them through compiletest, and
summarizes the outcomes in a tree that mirrors the manual's chapters.

Primary API:
    parse_hierarchy() - Map markdown files to their chapter/section path
    extract_examples() - Extract examples into the test tree
    preprocess_examples() - Add compiletest directives to extracted examples
    parse_log() - Build a ResultTree from a compiletest log
    ResultTree - Immutable pass/fail counter tree with merge
    build_reference_dashboard() - Run the whole pipeline

Example:
    from refdash import ResultTree, parse_log_lines

    tree = parse_log_lines(["ok [rmc] ref/Linkage/190.rs"])
    assert tree.num_pass == 1
"""

from __future__ import annotations

from refdash import cli, logging
from refdash.annotate import preprocess_examples
from refdash.config import DashboardConfig, load_config
from refdash.extract import extract_examples
from refdash.hierarchy import parse_hierarchy
from refdash.log_parser import parse_log, parse_log_line, parse_log_lines
from refdash.pipeline import build_reference_dashboard
from refdash.render import display_dashboard
from refdash.tree import ResultTree
from refdash.types import ExtractedExample, SourceLocation

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Model
    "ResultTree",
    "SourceLocation",
    "ExtractedExample",
    # Configuration
    "DashboardConfig",
    "load_config",
    # Pipeline stages
    "parse_hierarchy",
    "extract_examples",
    "preprocess_examples",
    "parse_log",
    "parse_log_line",
    "parse_log_lines",
    "display_dashboard",
    "build_reference_dashboard",
    # Utilities
    "cli",
    "logging",
]
