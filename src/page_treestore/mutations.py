# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""DocumentEditor - the operations that change a page tree.

All structural and settings changes go through an editor so the tree rules
are enforced in one place:

- the root holds rows, in a significant order
- a row holds the columns it was created with, and no others
- a column holds zero or one leaf
- every id appears once per document

Each successful operation emits one TreeChange on the document. Operations
that end up changing nothing (placing into an occupied column, moving a row
onto its own slot) emit nothing.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from .catalog import ContentTemplate, LayoutPreset
from .document import Document, NodeRef
from .exceptions import (
    DetachedNodeError,
    InvalidTargetError,
    InvalidValueError,
    NodeNotFoundError,
)
from .node import LEAF_CLASSES, ColumnNode, LeafNode, PageNode, RowNode
from .settings import set_default, set_override
from .subscription import TreeChange

logger = logging.getLogger(__name__)


class DocumentEditor:
    """Mutation engine bound to one document.

    Example:
        >>> editor = DocumentEditor(Document('home'))
        >>> row = editor.insert_row(3)
        >>> first = editor.document.children(row)[0]
        >>> leaf = editor.place_leaf(ContentTemplate(NodeType.TEXT, 'Hello'), first)
        >>> editor.update_local_setting(leaf, 'palette', 'text', '#ff0000')
    """

    __slots__ = ('document',)

    def __init__(self, document: Document) -> None:
        self.document = document

    def __repr__(self) -> str:
        return f"DocumentEditor({self.document.id!r})"

    # ==================== Rows ====================

    def insert_row(self, columns: int | LayoutPreset, at_index: int | None = None) -> RowNode:
        """Create a row with its columns and insert it in the row sequence.

        Args:
            columns: Column count, or a LayoutPreset.
            at_index: Position in the row sequence, 0 to len(rows).
                len(rows) or None appends.

        Returns:
            The new RowNode.

        Raises:
            InvalidTargetError: If columns < 1 or at_index is out of range.
        """
        count = columns.columns if isinstance(columns, LayoutPreset) else columns
        if count < 1:
            raise InvalidTargetError(f"A row needs at least one column, got {count}")

        doc = self.document
        root = doc.root
        size = len(root.child_ids)
        if at_index is None:
            at_index = size
        if not 0 <= at_index <= size:
            raise InvalidTargetError(f"Row index {at_index} out of range (0-{size})")

        row = RowNode()
        doc._insert_node(row, root, at_index, trigger=False)
        for _ in range(count):
            doc._insert_node(ColumnNode(), row, trigger=False)

        doc._notify(TreeChange('ins', row.id, root.id, at_index))
        logger.debug("Inserted row %s with %d columns at %d in %s", row.id, count, at_index, doc.id)
        return row

    def move_row(self, row: NodeRef, target_index: int) -> int:
        """Move a row to a drop-zone index of the row sequence.

        target_index is counted against the sequence before the row is
        taken out. Moving backward, the row lands exactly at target_index.
        Moving forward, it lands at target_index in the sequence without
        the row, clamped to its end, so with rows [A, B, C]:

            move A to 2 -> [B, C, A]
            move A to 3 -> [B, C, A]
            move C to 0 -> [C, A, B]

        Returns:
            The final index of the row.

        Raises:
            InvalidTargetError: If row is not a row or target_index is out
                of range (0 to len(rows)).
        """
        doc = self.document
        node = doc.node(row)
        if not isinstance(node, RowNode):
            raise InvalidTargetError(f"'{node.id}' is a {node.type}, not a row")

        root = doc.root
        size = len(root.child_ids)
        if not 0 <= target_index <= size:
            raise InvalidTargetError(f"Row index {target_index} out of range (0-{size})")

        current = doc.index_of_row(node.id)
        final = min(target_index, size - 1) if current < target_index else target_index
        if final == current:
            return current

        doc._remove_node(node, trigger=False, keep_subtree=True)
        doc._insert_node(node, root, final, trigger=False)
        doc._notify(TreeChange('move', node.id, root.id, final, reason=f'from #{current}'))
        logger.debug("Moved row %s from %d to %d in %s", node.id, current, final, doc.id)
        return final

    # ==================== Removal ====================

    def remove_node(self, node: NodeRef) -> PageNode:
        """Detach a row or leaf from its parent.

        The node and its descendants leave the document. The returned node
        keeps its id, content and local settings.

        Raises:
            DetachedNodeError: If the node has no parent (the root, or a
                node already removed).
            InvalidTargetError: If the node is a column.
            NodeNotFoundError: If an id is given that is not in the document.
        """
        doc = self.document
        if isinstance(node, PageNode) and node not in doc:
            if node.parent_id is None:
                raise DetachedNodeError(f"Node '{node.id}' is already detached")
            raise NodeNotFoundError(f"Node '{node.id}' is not part of document '{doc.id}'")
        target = doc.node(node)
        if isinstance(target, ColumnNode):
            raise InvalidTargetError(
                f"Column '{target.id}' belongs to its row and cannot be removed alone"
            )

        parent, _index = doc._remove_node(target)
        logger.debug("Removed %s %s from %s in %s", target.type, target.id, parent.id, doc.id)
        return target

    # ==================== Leaves ====================

    def place_leaf(
        self,
        source: ContentTemplate | LeafNode,
        target_column: NodeRef,
    ) -> LeafNode | None:
        """Create or move a leaf into a column.

        A ContentTemplate creates a new leaf with a fresh id and no style
        overrides. A LeafNode is moved: it leaves its current column and
        keeps its id and local settings.

        Placing into a column that already holds a leaf does nothing; racing
        drop events make this a normal case.

        Returns:
            The placed leaf, or None when the column was occupied.

        Raises:
            InvalidTargetError: If target_column is not a column.
            TypeError: If source is neither a template nor a leaf.
        """
        doc = self.document
        column = doc.node(target_column)
        if not isinstance(column, ColumnNode):
            raise InvalidTargetError(f"'{column.id}' is a {column.type}, not a column")
        if not isinstance(source, (ContentTemplate, LeafNode)):
            raise TypeError(
                f"source must be ContentTemplate or LeafNode, not {type(source).__name__}"
            )

        if not column.is_empty:
            logger.debug("Column %s is occupied, placement ignored", column.id)
            return None

        if isinstance(source, ContentTemplate):
            leaf = self._leaf_from_template(source)
            doc._insert_node(leaf, column)
            logger.debug("Created %s %s in column %s", leaf.type, leaf.id, column.id)
            return leaf

        # a leaf whose column left with its row is detached too
        origin = source.parent_id if source.parent_id in doc else None
        if origin is not None:
            doc.node(source)
            doc._remove_node(source, trigger=False, keep_subtree=True)
        doc._insert_node(source, column, trigger=False)
        doc._notify(TreeChange('move', source.id, column.id, 0, reason=f'from {origin}'))
        logger.debug("Moved %s %s from %s to column %s", source.type, source.id, origin, column.id)
        return source

    def _leaf_from_template(self, template: ContentTemplate) -> LeafNode:
        leaf = LEAF_CLASSES[template.type](text=template.text)
        if template.src is not None:
            leaf.local_settings.src = template.src
        if template.entries:
            leaf.local_settings.entries = [dict(e) for e in template.entries]  # type: ignore[misc]
        return leaf

    def update_leaf_content(self, leaf: NodeRef, value: str | Iterable[Any] | None) -> None:
        """Replace the primary content of a leaf.

        Text leaves take a string, image leaves a source, list leaves an
        iterable of ListEntry or ``{id, name}`` dicts.

        Raises:
            InvalidTargetError: If the node is not a leaf.
            TypeError: If a text leaf gets a non-string.
            InvalidValueError: If an image source or list entry does not
                validate. The leaf is left unchanged.
        """
        node = self._leaf(leaf)
        if node.content_field == 'text' and not isinstance(value, str):
            raise TypeError(f"Text content must be str, not {type(value).__name__}")
        try:
            setattr(node, node.content_field, value)
        except ValidationError as exc:
            raise InvalidValueError(
                f"Invalid {node.content_field} for {node.type} '{node.id}': {value!r}"
            ) from exc
        self.document._notify(TreeChange('upd', node.id, node.parent_id, reason=node.content_field))

    # ==================== Settings ====================

    def update_local_setting(self, leaf: NodeRef, category: str, field: str, value: Any) -> None:
        """Set one override field on a leaf, creating the category if absent.

        Raises:
            InvalidTargetError: If the node is not a leaf.
            UnknownSettingError: If category or field does not exist.
        """
        node = self._leaf(leaf)
        set_override(node.local_settings, category, field, value)
        self.document._notify(TreeChange('upd', node.id, node.parent_id, reason=f'{category}.{field}'))

    def update_global_setting(self, category: str, field: str, value: Any) -> None:
        """Set one field of the document defaults.

        Raises:
            UnknownSettingError: If category or field does not exist.
        """
        root = self.document.root
        set_default(root.global_settings, category, field, value)
        self.document._notify(TreeChange('upd', root.id, reason=f'{category}.{field}'))

    def _leaf(self, ref: NodeRef) -> LeafNode:
        if isinstance(ref, LeafNode) and ref not in self.document:
            # detached leaves can still be edited
            return ref
        node = self.document.node(ref)
        if not isinstance(node, LeafNode):
            raise InvalidTargetError(f"'{node.id}' is a {node.type}, not a leaf")
        return node
