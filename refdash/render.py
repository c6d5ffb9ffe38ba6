"""Terminal and JSON output for result trees."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

from refdash.logging import get_logger
from refdash.tree import ResultTree

logger = get_logger(__name__)


def format_summary(tree: ResultTree) -> str:
    """Return the one-line total for ``tree``."""
    return f"# of tests: {tree.total}\t✔️ {tree.num_pass}\t❌ {tree.num_fail}"


def format_tree(tree: ResultTree, max_depth: Optional[int] = None) -> str:
    """Render ``tree`` one node per line, indented by depth.

    Args:
        tree: Tree to render.
        max_depth: If set, omit nodes deeper than this (root is depth 0).
    """
    lines: List[str] = []
    for depth, node in tree.walk():
        if max_depth is not None and depth > max_depth:
            continue
        lines.append(
            f"{'  ' * depth}- {node.name} | "
            f"Pass={node.num_pass:,}, Fail={node.num_fail:,}"
        )
    return "\n".join(lines)


def display_dashboard(tree: ResultTree, max_depth: Optional[int] = None) -> None:
    """Print the totals followed by the per-chapter breakdown."""
    print(format_summary(tree))
    print(format_tree(tree, max_depth=max_depth))


def write_results_json(tree: ResultTree, path: Path) -> Path:
    """Write ``tree`` as indented JSON to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(tree.to_dict(), indent=2), encoding="utf-8")
    logger.info(f"Results written to: {path}")
    return path
