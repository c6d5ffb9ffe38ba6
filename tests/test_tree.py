"""Tests for ResultTree construction and merging."""

import pytest

from refdash.tree import ResultTree


def _chain(tree: ResultTree):
    """Return the nodes of a single-child chain from root to leaf."""
    nodes = [tree]
    while nodes[-1].children:
        assert len(nodes[-1].children) == 1
        nodes.append(nodes[-1].children[0])
    return nodes


def test_leaf_counts():
    passed = ResultTree.leaf("a", True)
    assert (passed.num_pass, passed.num_fail) == (1, 0)
    failed = ResultTree.leaf("a", False)
    assert (failed.num_pass, failed.num_fail) == (0, 1)
    assert failed.is_leaf()


def test_empty_root():
    root = ResultTree.empty("ref")
    assert root.name == "ref"
    assert root.total == 0
    assert root.is_leaf()


@pytest.mark.parametrize("passed", [True, False])
@pytest.mark.parametrize(
    "segments",
    [["ref"], ["ref", "Linkage"], ["ref", "Statements", "Expressions", "133"]],
)
def test_from_path_builds_chain(segments, passed):
    """Every node on the chain carries the leaf's counts."""
    tree = ResultTree.from_path(segments, passed)
    nodes = _chain(tree)

    assert [n.name for n in nodes] == segments
    expected = (1, 0) if passed else (0, 1)
    for node in nodes:
        assert (node.num_pass, node.num_fail) == expected


def test_from_path_does_not_consume_input():
    segments = ["ref", "Linkage", "190"]
    ResultTree.from_path(segments, True)
    assert segments == ["ref", "Linkage", "190"]


def test_from_path_rejects_empty():
    with pytest.raises(ValueError, match="at least 1 element"):
        ResultTree.from_path([], True)


def test_merge_name_mismatch_fails():
    with pytest.raises(ValueError, match="different roots"):
        ResultTree.merge(ResultTree.empty("ref"), ResultTree.empty("book"))


def test_merge_into_empty_root():
    root = ResultTree.empty("ref")
    tree = ResultTree.merge(root, ResultTree.from_path(["ref", "Linkage", "190"], True))

    assert (tree.num_pass, tree.num_fail) == (1, 0)
    assert tree.find(["Linkage", "190"]).num_pass == 1
    # Operands are not modified
    assert root.total == 0


def test_merge_same_path_sums_every_ancestor():
    ok = ResultTree.from_path(["ref", "Linkage", "190"], True)
    failed = ResultTree.from_path(["ref", "Linkage", "190"], False)
    tree = ResultTree.merge(ok, failed)

    for path in ([], ["Linkage"], ["Linkage", "190"]):
        node = tree.find(path)
        assert (node.num_pass, node.num_fail) == (1, 1)
    assert len(tree.children) == 1


def test_merge_disjoint_children_are_shared():
    a = ResultTree.from_path(["ref", "A", "1"], True)
    b = ResultTree.from_path(["ref", "B", "2"], False)
    tree = ResultTree.merge(a, b)

    assert [c.name for c in tree.children] == ["A", "B"]
    assert tree.child("A") is a.children[0]
    assert tree.child("B") is b.children[0]
    assert (tree.num_pass, tree.num_fail) == (1, 1)


def test_merge_keeps_first_appearance_order():
    tree = ResultTree.empty("ref")
    for name in ["C", "A", "B", "A", "C"]:
        tree = ResultTree.merge(tree, ResultTree.from_path(["ref", name, "1"], True))
    assert [c.name for c in tree.children] == ["C", "A", "B"]
    assert tree.child("A").num_pass == 2


def _sample_trees():
    return (
        ResultTree.merge(
            ResultTree.from_path(["ref", "A", "1"], True),
            ResultTree.from_path(["ref", "B", "2"], False),
        ),
        ResultTree.from_path(["ref", "A", "3"], False),
        ResultTree.merge(
            ResultTree.from_path(["ref", "B", "2"], True),
            ResultTree.from_path(["ref", "C", "X", "4"], True),
        ),
    )


def _counts(tree: ResultTree):
    """Return {path: (pass, fail)} for every node, ignoring sibling order."""
    result = {}

    def visit(node, prefix):
        path = prefix + (node.name,)
        result[path] = (node.num_pass, node.num_fail)
        for child in node.children:
            visit(child, path)

    visit(tree, ())
    return result


def test_merge_commutative():
    a, b, _ = _sample_trees()
    ab = ResultTree.merge(a, b)
    ba = ResultTree.merge(b, a)
    assert ab.total == a.total + b.total
    assert _counts(ab) == _counts(ba)


def test_merge_associative():
    a, b, c = _sample_trees()
    left = ResultTree.merge(ResultTree.merge(a, b), c)
    right = ResultTree.merge(a, ResultTree.merge(b, c))
    assert (left.num_pass, left.num_fail) == (right.num_pass, right.num_fail)
    assert _counts(left) == _counts(right)
    assert left == right


def test_parent_counts_equal_children_sum():
    a, b, c = _sample_trees()
    tree = ResultTree.merge(ResultTree.merge(a, b), c)
    for _, node in tree.walk():
        if node.children:
            assert node.num_pass == sum(ch.num_pass for ch in node.children)
            assert node.num_fail == sum(ch.num_fail for ch in node.children)


def test_walk_depths():
    tree = ResultTree.from_path(["ref", "A", "1"], True)
    assert [(d, n.name) for d, n in tree.walk()] == [(0, "ref"), (1, "A"), (2, "1")]


def test_find_missing_returns_none():
    tree = ResultTree.from_path(["ref", "A", "1"], True)
    assert tree.find(["B"]) is None
    assert tree.find(["A", "1", "deeper"]) is None
    assert tree.find([]) is tree


def test_to_dict():
    tree = ResultTree.from_path(["ref", "A"], False)
    assert tree.to_dict() == {
        "name": "ref",
        "num_pass": 0,
        "num_fail": 1,
        "children": [{"name": "A", "num_pass": 0, "num_fail": 1, "children": []}],
    }


def test_rejects_negative_counts():
    with pytest.raises(ValueError, match="non-negative"):
        ResultTree(name="x", num_pass=-1)


def test_rejects_duplicate_children():
    child = ResultTree.leaf("a", True)
    with pytest.raises(ValueError, match="Duplicate child"):
        ResultTree(name="x", num_pass=2, children=(child, child))
