"""Build a result tree from the compiletest log.

Each log line has the form ``<result> [rmc] <path>``, for instance
``ok [rmc] ref/Linkage/190.rs``. The path repeats the hierarchy the example was
extracted into, so splitting it recovers the chapter/section of the test.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Tuple

from refdash.logging import get_logger
from refdash.tree import ResultTree

logger = get_logger(__name__)

DEFAULT_SEPARATOR = " [rmc] "
PASS_RESULT = "ok"

_PATH_SPLIT = re.compile(r"[/.]")


def parse_log_line(
    line: str, separator: str = DEFAULT_SEPARATOR
) -> Tuple[List[str], bool]:
    """Return the hierarchy path and outcome of one log line.

    Any result other than ``ok`` counts as a failure. The ``.rs`` suffix of the
    test path is dropped.

    Raises:
        ValueError: If the separator is missing or the path is empty.
    """
    result, sep, path = line.partition(separator)
    if not sep:
        raise ValueError(f"Missing separator {separator!r} in log line: {line!r}")
    segments = _PATH_SPLIT.split(path)
    segments.pop()
    if not segments or not all(segments):
        raise ValueError(f"Malformed test path in log line: {line!r}")
    return segments, result == PASS_RESULT


def parse_log_lines(
    lines: Iterable[str], root: str = "ref", separator: str = DEFAULT_SEPARATOR
) -> ResultTree:
    """Merge the outcome of every log line into a tree rooted at ``root``.

    Raises:
        ValueError: On the first malformed line, or a line whose path does not
            start at ``root``.
    """
    tree = ResultTree.empty(root)
    for lineno, line in enumerate(lines, start=1):
        try:
            segments, passed = parse_log_line(line.rstrip("\r\n"), separator)
            tree = ResultTree.merge(tree, ResultTree.from_path(segments, passed))
        except ValueError as e:
            raise ValueError(f"Line {lineno}: {e}") from e
    logger.debug(f"Parsed {tree.total} test results")
    return tree


def parse_log(
    path: Path, root: str = "ref", separator: str = DEFAULT_SEPARATOR
) -> ResultTree:
    """Parse the compiletest log file at ``path``."""
    with open(path, "r", encoding="utf-8") as f:
        tree = parse_log_lines(f, root=root, separator=separator)
    logger.info(f"Loaded {tree.total} test results from {path}")
    return tree
