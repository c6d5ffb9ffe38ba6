"""Chapter/section hierarchy of the manual.

Parses the manual's table of contents (an mdBook ``SUMMARY.md``) and maps each
markdown file it links to the sequence of chapter/section titles leading to
it. The sequence later names the directory that the file's examples are
extracted into, and is recovered from test paths in the runner's log.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token

from refdash.logging import get_logger
from refdash.types import SegmentPath

logger = get_logger(__name__)

INTRODUCTION = "introduction.md"


def summary_prefix(title: str) -> str:
    """Return the opening every supported summary file must start with."""
    return f"# {title}\n\n[Introduction]({INTRODUCTION})"


def _events(tokens: Iterable[Token]) -> Iterator[Token]:
    """Flatten block tokens and their inline children into one event stream."""
    for token in tokens:
        if token.type == "inline" and token.children:
            yield from token.children
        else:
            yield token


def _link_target(summary_dir: Path, href: str) -> Path:
    return summary_dir.joinpath(*href.split("/"))


def parse_hierarchy_text(
    text: str,
    summary_dir: Path,
    title: str = "The Rust Reference",
    root: Sequence[str] = ("ref",),
) -> Dict[Path, SegmentPath]:
    """Map every markdown file linked from a summary document to its hierarchy.

    Nesting of the summary's lists gives the nesting of chapters. The title
    of each link is pushed on a stack when the link closes, which is also when
    the link's target is recorded; the end of a list item pops it again. A file
    linked more than once keeps the hierarchy of its last link.

    Args:
        text: Contents of the summary document.
        summary_dir: Directory the summary's links are relative to.
        title: Title the summary must open with.
        root: Segments prepended to every hierarchy.

    Returns:
        Mapping from markdown file path to its segment path.

    Raises:
        ValueError: If the summary does not start with the expected title and
            Introduction link, or its list items are unbalanced.
    """
    prefix = summary_prefix(title)
    if not text.startswith(prefix):
        raise ValueError("The start of the summary file changed.")

    md = MarkdownIt("commonmark")
    # Skip the title and the Introduction link, but not the rest of its paragraph
    prefix_events = list(_events(md.parse(prefix)))
    skip = max(i for i, e in enumerate(prefix_events) if e.type == "link_close") + 1
    events = list(_events(md.parse(text)))[skip:]

    root_path = tuple(root)
    hierarchy: Dict[Path, SegmentPath] = {
        _link_target(summary_dir, INTRODUCTION): root_path + ("Introduction",)
    }

    stack: List[str] = []
    link_href: Optional[str] = None
    link_title: Optional[List[str]] = None
    for event in events:
        if event.type == "link_open":
            link_href = str(event.attrGet("href") or "")
            link_title = []
        elif event.type in ("text", "code_inline") and link_title is not None:
            link_title.append(event.content)
        elif event.type == "link_close" and link_title is not None:
            stack.append("".join(link_title))
            if link_href:
                segments = root_path + tuple(stack)
                hierarchy[_link_target(summary_dir, link_href)] = segments
            else:
                logger.debug(f"Skipping draft chapter without a file: {stack[-1]}")
            link_href = None
            link_title = None
        elif event.type == "list_item_close":
            # Done with the chapter/section and all of its subsections
            if not stack:
                raise ValueError("Unbalanced list items in the summary file.")
            stack.pop()

    logger.debug(f"Resolved hierarchy for {len(hierarchy)} markdown files")
    return hierarchy


def parse_hierarchy(
    summary_path: Path,
    title: str = "The Rust Reference",
    root: Sequence[str] = ("ref",),
) -> Dict[Path, SegmentPath]:
    """Read ``summary_path`` and resolve the hierarchy of the files it links.

    Link targets are resolved relative to the summary's directory. See
    ``parse_hierarchy_text`` for details.
    """
    text = summary_path.read_text(encoding="utf-8")
    return parse_hierarchy_text(text, summary_path.parent, title=title, root=root)
