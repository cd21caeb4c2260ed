# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Structure rules for page trees and a checker for them."""

from __future__ import annotations

from typing import NamedTuple, TYPE_CHECKING

from .node import LEAF_TYPES, NodeType

if TYPE_CHECKING:
    from .document import Document


class ChildRule(NamedTuple):
    """Valid child types of a node type, with a (min, max) total count."""

    types: frozenset[NodeType]
    min_count: int = 0
    max_count: int | None = None


CHILD_RULES: dict[NodeType, ChildRule] = {
    NodeType.ROOT: ChildRule(frozenset({NodeType.ROW})),
    NodeType.ROW: ChildRule(frozenset({NodeType.COLUMN}), 1),
    NodeType.COLUMN: ChildRule(LEAF_TYPES, 0, 1),
    NodeType.TEXT: ChildRule(frozenset(), 0, 0),
    NodeType.IMAGE: ChildRule(frozenset(), 0, 0),
    NodeType.LIST: ChildRule(frozenset(), 0, 0),
}


def check(document: Document) -> list[str]:
    """Check a document against CHILD_RULES and its id links.

    Checks:
    - each child type is valid for its parent type
    - per-parent child count is within (min, max)
    - parent_id and child_ids agree in both directions
    - every node in the table is reachable from the root

    Returns:
        List of error messages (empty if valid).
    """
    errors: list[str] = []
    nodes = document._nodes
    reached: set[str] = set()

    stack = [document.root]
    while stack:
        node = stack.pop()
        if node.id in reached:
            errors.append(f"'{node.id}' is owned by more than one parent")
            continue
        reached.add(node.id)
        rule = CHILD_RULES[node.type]

        if len(set(node.child_ids)) != len(node.child_ids):
            errors.append(f"'{node.id}' lists a child more than once")

        for child_id in node.child_ids:
            child = nodes.get(child_id)
            if child is None:
                errors.append(f"'{node.id}' lists missing child '{child_id}'")
                continue
            stack.append(child)
            if child.parent_id != node.id:
                errors.append(
                    f"'{child_id}' is a child of '{node.id}' but its parent is '{child.parent_id}'"
                )
            if child.type not in rule.types:
                if rule.types:
                    errors.append(
                        f"'{child.type}' is not a valid child of '{node.type}'. "
                        f"Valid children: {', '.join(sorted(t.value for t in rule.types))}"
                    )
                else:
                    errors.append(
                        f"'{child.type}' is not a valid child of '{node.type}'. "
                        f"'{node.type}' cannot have children"
                    )

        actual = len(node.child_ids)
        if actual < rule.min_count:
            errors.append(
                f"'{node.id}' ({node.type}) requires at least {rule.min_count} children, "
                f"but has {actual}"
            )
        if rule.max_count is not None and actual > rule.max_count:
            errors.append(
                f"'{node.id}' ({node.type}) allows at most {rule.max_count} children, "
                f"but has {actual}"
            )

    for node_id in nodes.keys() - reached:
        errors.append(f"'{node_id}' is not reachable from the root")

    return errors
