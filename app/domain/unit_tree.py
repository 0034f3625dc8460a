"""Pure traversal rules for the unit hierarchy.

Units form a tree through parent_unit_id. Only "a unit cannot be its own
parent" is guaranteed by the data itself, so every walk here tracks visited
ids and stops on revisit; a corrupted parent chain yields a finite result
instead of a hang.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping


def children_index(parent_of: Mapping[int, int | None]) -> dict[int, list[int]]:
    """Invert a unit_id -> parent_id map into parent_id -> [child ids] (ids sorted)."""
    index: defaultdict[int, list[int]] = defaultdict(list)
    for unit_id, parent_id in parent_of.items():
        if parent_id is not None:
            index[parent_id].append(unit_id)
    for child_ids in index.values():
        child_ids.sort()
    return dict(index)


def descendant_ids(
    root_id: int,
    children_of: Mapping[int, Iterable[int]],
) -> list[int]:
    """Return ids of every unit below root_id, depth-first, root excluded.

    Args:
        root_id: Unit whose subtree is walked.
        children_of: parent_id -> child ids.

    Returns:
        Descendant ids in pre-order. Each id appears at most once.
    """
    visited = {root_id}
    result: list[int] = []
    stack = list(reversed(list(children_of.get(root_id, ()))))
    while stack:
        unit_id = stack.pop()
        if unit_id in visited:
            continue
        visited.add(unit_id)
        result.append(unit_id)
        stack.extend(reversed(list(children_of.get(unit_id, ()))))
    return result


def ancestor_ids(start_id: int, parent_of: Mapping[int, int | None]) -> list[int]:
    """Return ids from start_id's parent up to the root, nearest first.

    Stops at a missing parent, at a root, or when the chain revisits a unit.
    """
    visited = {start_id}
    result: list[int] = []
    current = parent_of.get(start_id)
    while current is not None and current not in visited:
        visited.add(current)
        result.append(current)
        current = parent_of.get(current)
    return result


def would_create_cycle(
    unit_id: int,
    new_parent_id: int | None,
    parent_of: Mapping[int, int | None],
) -> bool:
    """True if re-parenting unit_id under new_parent_id closes a loop.

    That is the case when new_parent_id is unit_id itself or one of its
    descendants (unit_id then appears among new_parent_id's ancestors).
    """
    if new_parent_id is None:
        return False
    if new_parent_id == unit_id:
        return True
    return unit_id in ancestor_ids(new_parent_id, parent_of)
