"""Extract code examples from the manual with ``rustdoc``.

``rustdoc --persist-doctests`` writes every doctest of a markdown file into its
own directory named ``<encoded-path>_<line>_<test-num>``, where ``/``, ``-`` and
``.`` in the markdown path are replaced by ``_``. The files are copied out of
that scratch directory into the test tree as ``<dest>/<line>.rs`` so that test
paths in the runner's log retain the manual's hierarchy.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Mapping

from refdash.config import DashboardConfig
from refdash.logging import get_logger
from refdash.types import ExtractedExample, SegmentPath, SourceLocation

logger = get_logger(__name__)


def parse_line_number(dir_name: str) -> int:
    """Return the line number encoded in a persisted doctest directory name.

    Raises:
        ValueError: If the name is not of the form ``<path>_<line>_<test-num>``.
    """
    parts = dir_name.rsplit("_", 2)
    if len(parts) != 3 or not parts[0]:
        raise ValueError(f"Malformed doctest directory name: {dir_name!r}")
    try:
        line = int(parts[1])
    except ValueError as e:
        raise ValueError(f"Malformed doctest directory name: {dir_name!r}") from e
    if line < 1:
        raise ValueError(f"Invalid line number in doctest directory: {dir_name!r}")
    return line


def collect_examples(
    scratch_dir: Path, source: Path, dest_dir: Path
) -> List[ExtractedExample]:
    """Copy the doctests persisted in ``scratch_dir`` into ``dest_dir``.

    Directories without files are skipped; those correspond to examples the
    markdown marks as ``ignore``. The test number is dropped because every
    persisted doctest has number 0.

    Args:
        scratch_dir: Directory ``rustdoc`` persisted the doctests into.
        source: Markdown file the doctests were extracted from.
        dest_dir: Directory receiving ``<line>.rs`` files.

    Returns:
        One ``ExtractedExample`` per copied file, sorted by directory name.
    """
    examples: List[ExtractedExample] = []
    for test_dir in sorted(p for p in scratch_dir.iterdir() if p.is_dir()):
        files = sorted(test_dir.iterdir())
        if not files:
            logger.debug(f"Skipping ignored example: {test_dir.name}")
            continue
        line = parse_line_number(test_dir.name)
        destination = dest_dir / f"{line}.rs"
        dest_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(files[0], destination)
        examples.append(ExtractedExample(SourceLocation(source, line), destination))
    return examples


def run_rustdoc(source: Path, scratch_dir: Path, test_builder: Path) -> None:
    """Persist the doctests of ``source`` into ``scratch_dir`` without running them."""
    cmd = [
        "rustdoc",
        "+nightly",
        "--test",
        "-Z",
        "unstable-options",
        str(source),
        "--test-builder",
        str(test_builder),
        "--persist-doctests",
        str(scratch_dir),
        "--no-run",
    ]
    logger.debug(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, stdout=subprocess.DEVNULL, check=False)
    if result.returncode != 0:
        logger.warning(f"rustdoc exited with status {result.returncode} for {source}")


def extract(
    source: Path, dest_dir: Path, config: DashboardConfig
) -> List[ExtractedExample]:
    """Extract the examples of one markdown file into ``dest_dir``.

    The scratch directory starts out empty for every extraction and is removed
    afterwards, also when collecting the examples fails.
    """
    scratch_dir = config.scratch_dir
    if scratch_dir.exists():
        logger.debug(f"Removing stale scratch directory {scratch_dir}")
        shutil.rmtree(scratch_dir)
    scratch_dir.mkdir(parents=True)
    try:
        run_rustdoc(source, scratch_dir, config.test_builder)
        examples = collect_examples(scratch_dir, source, dest_dir)
    finally:
        shutil.rmtree(scratch_dir, ignore_errors=True)
    logger.debug(f"Extracted {len(examples)} examples from {source}")
    return examples


def extract_examples(
    hierarchy: Mapping[Path, SegmentPath], config: DashboardConfig
) -> Dict[SourceLocation, Path]:
    """Extract examples from every markdown file in ``hierarchy``.

    Examples of a file with hierarchy ``("ref", "Linkage")`` are written to
    ``<test_root>/ref/Linkage/<line>.rs``.

    Returns:
        Mapping from each example's origin to the path it was extracted to.
    """
    extracted: Dict[SourceLocation, Path] = {}
    for source, segments in sorted(hierarchy.items()):
        dest_dir = config.test_root.joinpath(*segments)
        for example in extract(source, dest_dir, config):
            extracted[example.location] = example.destination
    logger.info(
        f"Extracted {len(extracted)} examples from {len(hierarchy)} markdown files"
    )
    return extracted
