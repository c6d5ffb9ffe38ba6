"""Hierarchical pass/fail counters for dashboard results.

A ``ResultTree`` mirrors the manual's chapter/section nesting. Leaves carry the
outcome of one or more tests; internal nodes carry the sum of their children.
Trees are immutable values: ``merge`` returns a new tree and shares any subtree
that only one operand has.

Example:
    tree = ResultTree.empty("ref")
    ok = ResultTree.from_path(["ref", "Linkage", "190"], True)
    failed = ResultTree.from_path(["ref", "Linkage", "190"], False)
    tree = ResultTree.merge(ResultTree.merge(tree, ok), failed)
    assert (tree.num_pass, tree.num_fail) == (1, 1)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class ResultTree:
    """A named node with pass/fail counts and uniquely named children.

    Attributes:
        name: Node label, unique among its siblings.
        num_pass: Number of passing tests in this subtree.
        num_fail: Number of failing tests in this subtree.
        children: Child nodes in stable first-appearance order.
    """

    name: str
    num_pass: int = 0
    num_fail: int = 0
    children: Tuple[ResultTree, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.num_pass < 0 or self.num_fail < 0:
            raise ValueError(
                f"Counts must be non-negative for node '{self.name}': "
                f"pass={self.num_pass}, fail={self.num_fail}"
            )
        names = [child.name for child in self.children]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate child names under node '{self.name}'")

    @classmethod
    def empty(cls, name: str) -> ResultTree:
        """Return a leaf with no recorded outcomes."""
        return cls(name=name)

    @classmethod
    def leaf(cls, name: str, passed: bool) -> ResultTree:
        """Return a leaf recording a single test outcome."""
        if passed:
            return cls(name=name, num_pass=1)
        return cls(name=name, num_fail=1)

    @classmethod
    def from_path(cls, segments: Sequence[str], passed: bool) -> ResultTree:
        """Build a single-path tree for one test outcome.

        The last segment becomes the leaf and the first segment the root. Every
        node on the chain carries the leaf's counts.

        Args:
            segments: Names from outermost to innermost.
            passed: Outcome of the test.

        Returns:
            Root of a chain of ``len(segments)`` nodes.

        Raises:
            ValueError: If ``segments`` is empty.
        """
        if not segments:
            raise ValueError("Path must contain at least 1 element")

        names = list(segments)
        tree = cls.leaf(names.pop(), passed)
        while names:
            tree = cls(
                name=names.pop(),
                num_pass=tree.num_pass,
                num_fail=tree.num_fail,
                children=(tree,),
            )
        return tree

    @classmethod
    def merge(cls, a: ResultTree, b: ResultTree) -> ResultTree:
        """Combine two trees rooted at the same name.

        Children found in only one operand are carried over unchanged; children
        found in both are merged recursively. Counts are summed, so callers
        must not merge two trees that both contain the same recorded outcome.

        Raises:
            ValueError: If the root names differ.
        """
        if a.name != b.name:
            raise ValueError(
                f"Cannot merge trees with different roots: '{a.name}' and '{b.name}'"
            )

        merged: Dict[str, ResultTree] = {child.name: child for child in a.children}
        for child in b.children:
            existing = merged.get(child.name)
            if existing is None:
                merged[child.name] = child
            else:
                merged[child.name] = cls.merge(existing, child)

        return cls(
            name=a.name,
            num_pass=a.num_pass + b.num_pass,
            num_fail=a.num_fail + b.num_fail,
            children=tuple(merged.values()),
        )

    @property
    def total(self) -> int:
        """Total number of recorded outcomes in this subtree."""
        return self.num_pass + self.num_fail

    def is_leaf(self) -> bool:
        """Return True if this node has no children."""
        return len(self.children) == 0

    def child(self, name: str) -> Optional[ResultTree]:
        """Return the direct child called ``name`` if present."""
        for node in self.children:
            if node.name == name:
                return node
        return None

    def find(self, path: Sequence[str]) -> Optional[ResultTree]:
        """Return the descendant reached by following ``path`` from this node.

        An empty path returns this node.
        """
        node: Optional[ResultTree] = self
        for name in path:
            if node is None:
                return None
            node = node.child(name)
        return node

    def walk(self, depth: int = 0) -> Iterator[Tuple[int, ResultTree]]:
        """Yield ``(depth, node)`` pairs in pre-order."""
        yield depth, self
        for node in self.children:
            yield from node.walk(depth + 1)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation of the subtree."""
        children: List[Dict[str, Any]] = [node.to_dict() for node in self.children]
        return {
            "name": self.name,
            "num_pass": self.num_pass,
            "num_fail": self.num_fail,
            "children": children,
        }
