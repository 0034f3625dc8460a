"""Unit tests for unit hierarchy traversal (app.domain.unit_tree)."""

from app.domain import unit_tree

#      1
#    /   \
#   2     5
#  / \
# 3   4
PARENTS = {1: None, 2: 1, 3: 2, 4: 2, 5: 1}


def test_children_index_sorted() -> None:
    index = unit_tree.children_index({10: None, 12: 10, 11: 10})
    assert index == {10: [11, 12]}


def test_descendants_depth_first() -> None:
    children = unit_tree.children_index(PARENTS)
    assert unit_tree.descendant_ids(1, children) == [2, 3, 4, 5]
    assert unit_tree.descendant_ids(2, children) == [3, 4]
    assert unit_tree.descendant_ids(3, children) == []


def test_descendants_of_unknown_unit() -> None:
    assert unit_tree.descendant_ids(99, unit_tree.children_index(PARENTS)) == []


def test_ancestors_nearest_first() -> None:
    assert unit_tree.ancestor_ids(3, PARENTS) == [2, 1]
    assert unit_tree.ancestor_ids(1, PARENTS) == []


def test_ancestors_stop_at_missing_parent() -> None:
    assert unit_tree.ancestor_ids(7, {7: 8}) == [8]


def test_corrupted_cycle_terminates() -> None:
    """A parent loop in stored data yields a finite walk."""
    looped = {1: 3, 2: 1, 3: 2}
    assert unit_tree.ancestor_ids(1, looped) == [3, 2]
    children = unit_tree.children_index(looped)
    assert sorted(unit_tree.descendant_ids(1, children)) == [2, 3]


def test_would_create_cycle() -> None:
    assert unit_tree.would_create_cycle(2, 2, PARENTS) is True
    assert unit_tree.would_create_cycle(1, 3, PARENTS) is True
    assert unit_tree.would_create_cycle(2, 4, PARENTS) is True
    assert unit_tree.would_create_cycle(2, 5, PARENTS) is False
    assert unit_tree.would_create_cycle(3, None, PARENTS) is False
