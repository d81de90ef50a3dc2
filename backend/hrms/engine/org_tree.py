"""Org Tree Builder - Nest a flat parent-pointer list into a hierarchy"""
from collections import defaultdict
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..domain.errors import CycleDetectedError


def _key(value: Any) -> Optional[str]:
    # IDs are compared as strings; empty parents count as roots
    if value is None or value == "":
        return None
    return str(value)


def build_org_tree(
    units: Sequence[Mapping[str, Any]],
    parent_id: Any = None,
    id_field: str = "org_unit_id",
    parent_field: str = "parent_id"
) -> List[Dict[str, Any]]:
    """
    Build the subtree hanging off `parent_id` (None = the conceptual root).

    Every returned node is a copy of its unit with a `children` list.
    Sibling order follows the input order.

    Raises:
        CycleDetectedError: if a unit is reached twice, which only happens
            when parent pointers loop back on themselves
    """
    children_by_parent: Dict[Optional[str], List[Mapping[str, Any]]] = defaultdict(list)
    for unit in units:
        children_by_parent[_key(unit.get(parent_field))].append(unit)

    start = _key(parent_id)
    visited = {start} if start is not None else set()

    roots: List[Dict[str, Any]] = []
    pending = [(start, roots)]
    while pending:
        current, siblings = pending.pop()
        for unit in children_by_parent.get(current, []):
            unit_key = _key(unit.get(id_field))
            if unit_key in visited:
                raise CycleDetectedError(
                    f"Cycle detected in org unit hierarchy at {unit_key}",
                    details={"org_unit_id": unit_key, "parent_id": current}
                )
            visited.add(unit_key)

            node = dict(unit)
            node["children"] = []
            siblings.append(node)
            pending.append((unit_key, node["children"]))

    return roots
