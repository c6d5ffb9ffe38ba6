"""Tests for resolving the manual's chapter hierarchy."""

from pathlib import Path

import pytest

from refdash.hierarchy import parse_hierarchy, parse_hierarchy_text, summary_prefix

PREFIX = "# The Rust Reference\n\n[Introduction](introduction.md)\n\n"


def test_nested_items(tmp_path: Path):
    summary = tmp_path / "SUMMARY.md"
    summary.write_text(PREFIX + "- [A](a.md)\n    - [B](b.md)\n")

    hierarchy = parse_hierarchy(summary)

    assert hierarchy == {
        tmp_path / "introduction.md": ("ref", "Introduction"),
        tmp_path / "a.md": ("ref", "A"),
        tmp_path / "b.md": ("ref", "A", "B"),
    }


def test_custom_title():
    text = "# Title\n\n[Introduction](introduction.md)\n- [A](a.md)\n    - [B](b.md)\n"
    hierarchy = parse_hierarchy_text(text, Path("src"), title="Title")

    assert hierarchy[Path("src/introduction.md")] == ("ref", "Introduction")
    assert hierarchy[Path("src/a.md")] == ("ref", "A")
    assert hierarchy[Path("src/b.md")] == ("ref", "A", "B")


def test_siblings_and_deep_nesting():
    text = PREFIX + (
        "- [Notation](notation.md)\n"
        "- [Items](items.md)\n"
        "    - [Modules](items/modules.md)\n"
        "    - [Functions](items/functions.md)\n"
        "        - [Closures](items/closures.md)\n"
        "    - [Traits](items/traits.md)\n"
        "- [Linkage](linkage.md)\n"
    )
    hierarchy = parse_hierarchy_text(text, Path("doc"))

    assert hierarchy[Path("doc/notation.md")] == ("ref", "Notation")
    assert hierarchy[Path("doc/items.md")] == ("ref", "Items")
    assert hierarchy[Path("doc/items/modules.md")] == ("ref", "Items", "Modules")
    assert hierarchy[Path("doc/items/closures.md")] == (
        "ref",
        "Items",
        "Functions",
        "Closures",
    )
    assert hierarchy[Path("doc/items/traits.md")] == ("ref", "Items", "Traits")
    assert hierarchy[Path("doc/linkage.md")] == ("ref", "Linkage")


def test_custom_root():
    hierarchy = parse_hierarchy_text(
        PREFIX + "- [A](a.md)\n", Path("."), root=("test", "ref")
    )
    assert hierarchy[Path("a.md")] == ("test", "ref", "A")
    assert hierarchy[Path("introduction.md")] == ("test", "ref", "Introduction")


def test_title_with_inline_code_is_one_segment():
    hierarchy = parse_hierarchy_text(
        PREFIX + "- [The `Drop` trait](drop.md)\n", Path(".")
    )
    assert hierarchy[Path("drop.md")] == ("ref", "The Drop trait")


def test_last_link_wins():
    text = PREFIX + "- [A](a.md)\n- [B](b.md)\n    - [Again](a.md)\n"
    hierarchy = parse_hierarchy_text(text, Path("."))
    assert hierarchy[Path("a.md")] == ("ref", "B", "Again")


def test_draft_chapter_without_file():
    text = PREFIX + "- [Draft]()\n    - [C](c.md)\n"
    hierarchy = parse_hierarchy_text(text, Path("."))
    assert hierarchy[Path("c.md")] == ("ref", "Draft", "C")
    assert len(hierarchy) == 2


def test_link_in_introduction_paragraph():
    text = (
        "# The Rust Reference\n\n"
        "[Introduction](introduction.md)\n"
        "[Notation](notation.md)\n"
    )
    hierarchy = parse_hierarchy_text(text, Path("."))
    assert hierarchy == {
        Path("introduction.md"): ("ref", "Introduction"),
        Path("notation.md"): ("ref", "Notation"),
    }


def test_prefix_mismatch_fails():
    with pytest.raises(ValueError, match="start of the summary file changed"):
        parse_hierarchy_text("# Other Book\n\n- [A](a.md)\n", Path("."))


def test_summary_prefix():
    assert summary_prefix("T") == "# T\n\n[Introduction](introduction.md)"


def test_missing_summary_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        parse_hierarchy(tmp_path / "SUMMARY.md")
