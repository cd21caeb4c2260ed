# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Conversion between live documents and plain, JSON-compatible data.

Plain shape (keys as stored)::

    {"id": "home", "type": "root-node",
     "children": {rowId: {"id": ..., "type": "row-node",
                          "children": {colId: {"id": ..., "type": "col-node",
                                               "children": {leafId: leaf}}}}},
     "globalSettings": {"palette": {...}, "styling": {...}}}

    leaf = {"id": ..., "type": "text-node", "text": ..., "localSettings": {...}}

Plain data never contains parent ids: parents are re-derived from nesting
on the way back. Rehydration dispatches on the stored ``type`` tag; ids are
kept verbatim so identity survives save/load and template round trips.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from .document import Document
from .exceptions import RehydrationError
from .node import (
    LEAF_CLASSES,
    LEAF_TYPES,
    ColumnNode,
    LeafNode,
    NodeType,
    PageNode,
    RootNode,
    RowNode,
)
from .settings import GlobalSettings, LocalSettings
from .validation import CHILD_RULES

logger = logging.getLogger(__name__)

PlainNode = dict[str, Any]


# ==================== Live -> Plain ====================


def to_plain(document: Document) -> PlainNode:
    """Deep-copy a document into plain data.

    The live tree is only read; its nodes stay usable after the call.
    """
    return node_to_plain(document, document.root)


def node_to_plain(document: Document, node: PageNode) -> PlainNode:
    """Deep-copy one attached node and its subtree into plain data."""
    plain: PlainNode = {'id': node.id, 'type': node.type.value}

    if isinstance(node, LeafNode):
        plain['text'] = node.text
        plain['localSettings'] = node.local_settings.model_dump(by_alias=True, exclude_none=True)
        return plain

    plain['children'] = {
        child.id: node_to_plain(document, child) for child in document.children(node)
    }
    if isinstance(node, RootNode):
        plain['globalSettings'] = node.global_settings.model_dump(by_alias=True)
    return plain


# ==================== Plain -> Live ====================


def _node_type(plain: Mapping[str, Any]) -> NodeType | None:
    try:
        return NodeType(plain.get('type'))
    except ValueError:
        return None


def _children(plain: Mapping[str, Any]) -> list[tuple[str, Mapping[str, Any]]]:
    children = plain.get('children') or {}
    if not isinstance(children, Mapping):
        raise RehydrationError(
            f"children of '{plain.get('id')}' must be a mapping, not {type(children).__name__}"
        )
    return list(children.items())


def from_plain(plain: Mapping[str, Any]) -> Document:
    """Rebuild a live document from plain root data.

    Raises:
        RehydrationError: If the data is not a root, or a row or column is
            malformed. Unknown leaf tags are skipped, not raised.
    """
    if not isinstance(plain, Mapping):
        raise RehydrationError(f"Plain document must be a mapping, not {type(plain).__name__}")
    if _node_type(plain) is not NodeType.ROOT:
        raise RehydrationError(f"Expected a '{NodeType.ROOT}', got {plain.get('type')!r}")
    document_id = plain.get('id')
    if not isinstance(document_id, str) or not document_id:
        raise RehydrationError("Plain document has no id")

    try:
        global_settings = GlobalSettings.model_validate(plain.get('globalSettings') or {})
    except ValidationError as exc:
        raise RehydrationError(f"Invalid globalSettings in '{document_id}': {exc}") from exc

    document = Document(document_id, global_settings)
    for key, child in _children(plain):
        node_from_plain(document, child, document.root, key=key)
    return document


def node_from_plain(
    document: Document,
    plain: Mapping[str, Any],
    parent: PageNode,
    key: str | None = None,
) -> PageNode | None:
    """Rebuild one plain node under parent, recursively.

    Args:
        document: The document receiving the nodes.
        plain: Plain data of the node.
        parent: Attached container node (root, row or column).
        key: The children-map key, used as id when the data has none.

    Returns:
        The attached node, or None for a leaf with an unknown tag.

    Raises:
        RehydrationError: If a non-leaf tag is missing, unknown, or not a
            valid child of parent, or any descendant is malformed. The
            document is then left as it was before the call.
    """
    if not isinstance(plain, Mapping):
        raise RehydrationError(f"Node '{key}' must be a mapping, not {type(plain).__name__}")
    allowed = CHILD_RULES[parent.type].types
    node_type = _node_type(plain)

    if node_type is None:
        if parent.type is NodeType.COLUMN:
            logger.warning(
                "Skipping leaf '%s' with unknown type %r in column '%s'",
                plain.get('id', key), plain.get('type'), parent.id,
            )
            return None
        raise RehydrationError(
            f"Node '{plain.get('id', key)}' under '{parent.id}' has unknown type {plain.get('type')!r}"
        )
    if node_type not in allowed:
        raise RehydrationError(f"'{node_type}' cannot be a child of '{parent.type}'")

    node_id = plain.get('id') or key
    if not node_id:
        raise RehydrationError(f"'{node_type}' under '{parent.id}' has no id")
    if node_id in document:
        raise RehydrationError(f"Id '{node_id}' appears more than once in '{document.id}'")

    node = _BUILDERS[node_type](node_id, plain)
    if node_type in LEAF_TYPES and parent.child_ids:
        raise RehydrationError(f"Column '{parent.id}' holds more than one leaf")
    document._insert_node(node, parent, trigger=False)

    if not node.is_leaf:
        try:
            for child_key, child in _children(plain):
                node_from_plain(document, child, node, key=child_key)
        except RehydrationError:
            # drop the partial subtree
            document._remove_node(node, trigger=False)
            raise
    return node


def _build_leaf(node_id: str, plain: Mapping[str, Any]) -> LeafNode:
    try:
        local_settings = LocalSettings.model_validate(plain.get('localSettings') or {})
    except ValidationError as exc:
        raise RehydrationError(f"Invalid localSettings in '{node_id}': {exc}") from exc
    cls = LEAF_CLASSES[NodeType(plain['type'])]
    return cls(id=node_id, text=plain.get('text') or '', local_settings=local_settings)


_BUILDERS: dict[NodeType, Callable[[str, Mapping[str, Any]], PageNode]] = {
    NodeType.ROW: lambda node_id, plain: RowNode(node_id),
    NodeType.COLUMN: lambda node_id, plain: ColumnNode(node_id),
    NodeType.TEXT: _build_leaf,
    NodeType.IMAGE: _build_leaf,
    NodeType.LIST: _build_leaf,
}
