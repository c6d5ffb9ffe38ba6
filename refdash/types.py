"""Value types addressing extracted examples.

Both types are immutable so they can be used as mapping keys and shared
between pipeline stages without copying.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

# Ordered chapter/section names, outermost first, e.g. ("ref", "Linkage").
SegmentPath = Tuple[str, ...]


@dataclass(frozen=True, order=True)
class SourceLocation:
    """Origin of one example inside the manual.

    Attributes:
        path: Manual-source (markdown) file containing the example.
        line: 1-based line number of the code block introducing the example.
    """

    path: Path
    line: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


@dataclass(frozen=True)
class ExtractedExample:
    """An example's origin paired with the file its code was copied to.

    Attributes:
        location: Where the example lives in the manual.
        destination: Path of the materialized ``<line>.rs`` file.
    """

    location: SourceLocation
    destination: Path
