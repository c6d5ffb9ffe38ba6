"""Add compiletest directives to extracted examples.

Code block attributes in the manual (``edition2015``, ``compile_fail``,
``should_panic``) are lost when rustdoc extracts an example, so they are
re-applied as header comments understood by compiletest and RMC.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Tuple

from refdash.logging import get_logger
from refdash.types import SourceLocation

logger = get_logger(__name__)

EDITION_2015_MARKER = "edition2015"
COMPILE_FAIL_MARKER = "compile_fail"
SHOULD_PANIC_MARKER = "should_panic"

EDITION_2015_DIRECTIVE = "// compile-flags: --edition 2015"
EDITION_2018_DIRECTIVE = "// compile-flags: --edition 2018"
CHECK_FAIL_DIRECTIVE = "// rmc-check-fail"
VERIFY_FAIL_DIRECTIVE = "// rmc-verify-fail"
UNWIND_DIRECTIVE = "// cbmc-flags: --unwind 1 --unwinding-assertions"

# Examples that loop forever under unbounded verification, relative to the
# test root. Maintained by hand: add an entry whenever a new example hangs.
UNWIND_FIXUPS: FrozenSet[Tuple[str, ...]] = frozenset(
    {
        ("ref", "Appendices", "Glossary", "263.rs"),
        ("ref", "Linkage", "190.rs"),
        (
            "ref",
            "Statements and expressions",
            "Expressions",
            "Loop expressions",
            "133.rs",
        ),
        (
            "ref",
            "Statements and expressions",
            "Expressions",
            "Method call expressions",
            "10.rs",
        ),
    }
)


def prepend_text(path: Path, text: str) -> None:
    """Insert ``text`` as a new first line of the file at ``path``."""
    code = path.read_text(encoding="utf-8")
    path.write_text(f"{text}\n{code}", encoding="utf-8")


def read_source_lines(path: Path) -> List[str]:
    r"""Return the lines of ``path`` as rustdoc numbers them.

    Only ``\n`` ends a line; a ``\r`` right before it is dropped. Other
    characters Python treats as line breaks, such as form feeds, stay part of
    their line.
    """
    text = path.read_bytes().decode("utf-8")
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def read_origin_line(lines: List[str], location: SourceLocation) -> str:
    """Return the 1-based line ``location.line`` from the file's ``lines``.

    Raises:
        ValueError: If the line does not exist.
    """
    if not 1 <= location.line <= len(lines):
        raise ValueError(f"No line {location.line} in {location.path}")
    return lines[location.line - 1]


def annotate_example(origin_line: str, destination: Path) -> List[str]:
    """Prepend the directives implied by the code block's opening line.

    Each directive is inserted above the previous ones, so the last one added
    ends up first in the file.

    Returns:
        The directives in the order they were prepended.
    """
    directives: List[str] = []
    if EDITION_2015_MARKER in origin_line:
        directives.append(EDITION_2015_DIRECTIVE)
    else:
        directives.append(EDITION_2018_DIRECTIVE)
    # Most compile_fail examples are rejected by the type checker
    if COMPILE_FAIL_MARKER in origin_line:
        directives.append(CHECK_FAIL_DIRECTIVE)
    # Run-time panics should be caught by verification
    if SHOULD_PANIC_MARKER in origin_line:
        directives.append(VERIFY_FAIL_DIRECTIVE)

    for directive in directives:
        prepend_text(destination, directive)
    return directives


def apply_unwind_fixups(
    test_root: Path, fixups: Iterable[Tuple[str, ...]] = UNWIND_FIXUPS
) -> List[Path]:
    """Bound loop unwinding for the examples listed in ``fixups``.

    Returns:
        The patched file paths, sorted.

    Raises:
        FileNotFoundError: If a listed example was not extracted.
    """
    patched: List[Path] = []
    for segments in sorted(set(fixups)):
        path = test_root.joinpath(*segments)
        prepend_text(path, UNWIND_DIRECTIVE)
        patched.append(path)
    return patched


def preprocess_examples(
    examples: Mapping[SourceLocation, Path],
    test_root: Path,
    fixups: Iterable[Tuple[str, ...]] = UNWIND_FIXUPS,
) -> int:
    """Annotate every extracted example, then apply the unwind fixups.

    Args:
        examples: Mapping from example origin to extracted file.
        test_root: Root the fixup paths are relative to.
        fixups: Paths needing a bounded unwind.

    Returns:
        Number of example files annotated from their origin line.
    """
    # Each markdown file is read once for all of its examples
    sources: Dict[Path, List[str]] = {}
    for location, destination in sorted(examples.items()):
        if location.path not in sources:
            sources[location.path] = read_source_lines(location.path)
        origin_line = read_origin_line(sources[location.path], location)
        directives = annotate_example(origin_line, destination)
        logger.debug(f"{location}: {', '.join(directives)}")

    patched = apply_unwind_fixups(test_root, fixups)
    logger.info(
        f"Annotated {len(examples)} examples; bounded unwinding for {len(patched)}"
    )
    return len(examples)
