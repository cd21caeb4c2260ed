# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Document - the live page tree held as a flat node table.

A Document owns every attached node in a dict keyed by node id. Parent and
child relations are id relations stored on the nodes themselves
(``parent_id`` and ``child_ids``), so no node holds a reference to another
node and the table is the single owner of the whole tree.

The Document is the handle threaded into every component: the mutation
engine (``DocumentEditor``) wraps one, the settings cascade reads its root,
and serialization converts one to and from plain data.

Example:
    >>> doc = Document('home')
    >>> editor = DocumentEditor(doc)
    >>> row = editor.insert_row(2)
    >>> [c.type for c in doc.children(row)]
    [<NodeType.COLUMN: 'col-node'>, <NodeType.COLUMN: 'col-node'>]
    >>> doc.parent(row) is doc.root
    True
"""

from __future__ import annotations

from typing import Iterator, TYPE_CHECKING

from .exceptions import DetachedNodeError, InvalidTargetError, NodeNotFoundError
from .node import ColumnNode, LeafNode, PageNode, RootNode, RowNode
from .settings import GlobalSettings, cascade
from .subscription import SubscriptionMixin, TreeChange

if TYPE_CHECKING:
    from .settings import EffectiveSettings

NodeRef = PageNode | str


class Document(SubscriptionMixin):
    """A page tree with O(1) lookup by node id.

    Document provides read access and navigation. The ``_insert_node`` and
    ``_remove_node`` primitives keep parent and child ids consistent; every
    public mutation goes through ``DocumentEditor``.

    Attributes:
        id: The document id, which is also the root node id.
        root: The RootNode holding the document defaults.
    """

    __slots__ = ('_nodes', '_root_id', '_subscribers')

    def __init__(
        self,
        document_id: str,
        global_settings: GlobalSettings | None = None,
    ) -> None:
        """Initialize an empty document.

        Args:
            document_id: Caller-chosen id (e.g. from a routing parameter).
            global_settings: Document defaults. A fully populated default
                GlobalSettings is used when None.
        """
        root = RootNode(document_id, global_settings)
        self._nodes: dict[str, PageNode] = {root.id: root}
        self._root_id = root.id
        self._init_subscribers()

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return f"Document({self._root_id!r}, rows={len(self.root.child_ids)}, nodes={len(self._nodes)})"

    def __len__(self) -> int:
        """Return the number of nodes, root included."""
        return len(self._nodes)

    def __iter__(self) -> Iterator[PageNode]:
        """Iterate over all nodes depth first, in child order."""
        for _depth, node in self.walk():
            yield node

    def __contains__(self, ref: object) -> bool:
        if isinstance(ref, PageNode):
            return self._nodes.get(ref.id) is ref
        return ref in self._nodes

    def __getitem__(self, node_id: str) -> PageNode:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(f"Node '{node_id}' not found in document '{self._root_id}'") from None

    # ==================== Navigation ====================

    @property
    def id(self) -> str:
        return self._root_id

    @property
    def root(self) -> RootNode:
        return self._nodes[self._root_id]  # type: ignore[return-value]

    @property
    def global_settings(self) -> GlobalSettings:
        return self.root.global_settings

    def get(self, node_id: str, default: PageNode | None = None) -> PageNode | None:
        """Get node by id, with default."""
        return self._nodes.get(node_id, default)

    def node(self, ref: NodeRef) -> PageNode:
        """Return the attached node for a node or an id.

        Raises:
            NodeNotFoundError: If the id is unknown, or the node object is
                not the one registered in this document.
        """
        if isinstance(ref, PageNode):
            if self._nodes.get(ref.id) is not ref:
                raise NodeNotFoundError(f"Node '{ref.id}' is not part of document '{self._root_id}'")
            return ref
        return self[ref]

    def children(self, ref: NodeRef) -> list[PageNode]:
        """Return the children of a node in order."""
        node = self.node(ref)
        return [self._nodes[child_id] for child_id in node.child_ids]

    def parent(self, ref: NodeRef) -> PageNode | None:
        """Return the parent of a node, None for the root."""
        node = self.node(ref)
        if node.parent_id is None:
            return None
        return self._nodes[node.parent_id]

    def rows(self) -> list[RowNode]:
        """Return the row sequence of the document."""
        return self.children(self._root_id)  # type: ignore[return-value]

    def index_of_row(self, row_id: str) -> int:
        """Get the position of a row in the row sequence.

        Raises:
            NodeNotFoundError: If no row has this id.
        """
        try:
            return self.root.child_ids.index(row_id)
        except ValueError:
            raise NodeNotFoundError(f"Row '{row_id}' not found in document '{self._root_id}'") from None

    def leaf_of(self, column: NodeRef) -> LeafNode | None:
        """Return the leaf held by a column, or None if it is empty."""
        children = self.children(column)
        return children[0] if children else None  # type: ignore[return-value]

    def walk(self, start: NodeRef | None = None) -> Iterator[tuple[int, PageNode]]:
        """Yield (depth, node) pairs depth first, starting node included.

        Args:
            start: Node or id to start from. Defaults to the root (depth 0).
        """
        first = self.root if start is None else self.node(start)

        def _walk(node: PageNode, depth: int) -> Iterator[tuple[int, PageNode]]:
            yield depth, node
            for child_id in node.child_ids:
                yield from _walk(self._nodes[child_id], depth + 1)

        return _walk(first, 0)

    def leaves(self) -> list[LeafNode]:
        """Return every attached leaf, in document order."""
        return [node for node in self if isinstance(node, LeafNode)]

    def columns(self) -> list[ColumnNode]:
        return [node for node in self if isinstance(node, ColumnNode)]

    # ==================== Settings ====================

    def resolve(self, ref: NodeRef) -> EffectiveSettings | None:
        """Compute the effective settings of a leaf.

        Resolution happens on every call and is never cached, so edits to
        the document defaults are seen immediately by every leaf that does
        not override the edited field.

        Returns:
            EffectiveSettings for a leaf, None for root, rows and columns.
        """
        node = self.node(ref)
        if not isinstance(node, LeafNode):
            return None
        return cascade(self.root.global_settings, node.local_settings)

    # ==================== Validation ====================

    def check(self) -> list[str]:
        """Check structure rules, returning error messages (empty if valid)."""
        from .validation import check
        return check(self)

    @property
    def is_valid(self) -> bool:
        return not self.check()

    # ==================== Internal Primitives ====================

    def _insert_node(
        self,
        node: PageNode,
        parent: PageNode,
        index: int | None = None,
        trigger: bool = True,
        reason: str | None = None,
    ) -> int:
        """Register node and link it under parent at index.

        Args:
            node: A detached node.
            parent: An attached node of this document.
            index: Position among parent's children; None appends.
            trigger: If True, notify subscribers with an 'ins' event.
            reason: Optional reason string for the event.

        Returns:
            The position the node was inserted at.

        Raises:
            InvalidTargetError: If the id is already used by another node.
        """
        existing = self._nodes.get(node.id)
        if existing is not None and existing is not node:
            raise InvalidTargetError(
                f"Id '{node.id}' already used in document '{self._root_id}'"
            )
        if index is None:
            index = len(parent.child_ids)
        parent.child_ids.insert(index, node.id)
        node.parent_id = parent.id
        self._nodes[node.id] = node

        if trigger:
            self._notify(TreeChange('ins', node.id, parent.id, index, reason))
        return index

    def _remove_node(
        self,
        node: PageNode,
        trigger: bool = True,
        keep_subtree: bool = False,
        reason: str | None = None,
    ) -> tuple[PageNode, int]:
        """Unlink node from its parent.

        Args:
            node: The node to unlink.
            trigger: If True, notify subscribers with a 'del' event.
            keep_subtree: If True, leave the node and its descendants in the
                table (used while moving). Otherwise they are dropped.
            reason: Optional reason string for the event.

        Returns:
            Tuple of (former parent, former index).

        Raises:
            DetachedNodeError: If the node has no parent.
        """
        if node.parent_id is None:
            if node.id == self._root_id:
                raise DetachedNodeError(f"Cannot remove the root of document '{self._root_id}'")
            raise DetachedNodeError(f"Node '{node.id}' is already detached")

        parent = self._nodes[node.parent_id]
        index = parent.child_ids.index(node.id)
        del parent.child_ids[index]

        if not keep_subtree:
            for _depth, descendant in list(self.walk(node)):
                del self._nodes[descendant.id]
        node.parent_id = None

        if trigger:
            self._notify(TreeChange('del', node.id, parent.id, index, reason))
        return parent, index
