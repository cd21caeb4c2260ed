# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Page tree node classes.

The node set is closed: every node type is a member of ``NodeType`` and has
exactly one class registered in ``NODE_CLASSES``. Nodes do not hold object
references to each other. A node knows the id of its parent and the ordered
ids of its children; the owning ``Document`` maps ids to nodes.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any, ClassVar, Iterable

from .settings import GlobalSettings, ListEntry, LocalSettings


def new_id() -> str:
    """Return a fresh node id."""
    return str(uuid.uuid4())


class NodeType(str, Enum):
    """Type tags, valued as they are persisted."""

    ROOT = 'root-node'
    ROW = 'row-node'
    COLUMN = 'col-node'
    TEXT = 'text-node'
    IMAGE = 'image-node'
    LIST = 'sidebar-node'

    @property
    def is_leaf(self) -> bool:
        return self in LEAF_TYPES

    def __str__(self) -> str:
        return self.value


LEAF_TYPES = frozenset({NodeType.TEXT, NodeType.IMAGE, NodeType.LIST})


class PageNode:
    """Base class of every node in a page tree.

    Each node has:
    - id: Opaque string, unique within one document
    - type: The node's NodeType (class-level)
    - parent_id: Id of the containing node, None for the root or when detached
    - child_ids: Ordered ids of the children
    """

    __slots__ = ('id', 'parent_id', 'child_ids')

    type: ClassVar[NodeType]

    def __init__(self, id: str | None = None, parent_id: str | None = None) -> None:
        self.id = id or new_id()
        self.parent_id = parent_id
        self.child_ids: list[str] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r}, children={len(self.child_ids)})"

    @property
    def is_leaf(self) -> bool:
        return self.type.is_leaf

    @property
    def is_attached(self) -> bool:
        """True if the node has a parent."""
        return self.parent_id is not None


class RootNode(PageNode):
    """Document root. Its id is the document id; its children are rows."""

    __slots__ = ('global_settings',)

    type = NodeType.ROOT

    def __init__(self, id: str, global_settings: GlobalSettings | None = None) -> None:
        super().__init__(id)
        self.global_settings = global_settings if global_settings is not None else GlobalSettings()


class RowNode(PageNode):
    """Horizontal band. Its columns are fixed when the row is created."""

    __slots__ = ()

    type = NodeType.ROW


class ColumnNode(PageNode):
    """Single drop slot holding at most one leaf."""

    __slots__ = ()

    type = NodeType.COLUMN

    @property
    def is_empty(self) -> bool:
        return not self.child_ids


class LeafNode(PageNode):
    """Content-bearing node with display text and a local settings override.

    ``content_field`` names the attribute replaced by a content update.
    """

    __slots__ = ('text', 'local_settings')

    content_field: ClassVar[str] = 'text'

    def __init__(
        self,
        id: str | None = None,
        text: str = '',
        local_settings: LocalSettings | None = None,
        parent_id: str | None = None,
    ) -> None:
        super().__init__(id, parent_id)
        self.text = text
        self.local_settings = local_settings if local_settings is not None else LocalSettings()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r}, text={self.text!r})"


class TextNode(LeafNode):
    __slots__ = ()

    type = NodeType.TEXT


class ImageNode(LeafNode):
    """Image leaf. The source is kept with the local settings."""

    __slots__ = ()

    type = NodeType.IMAGE
    content_field = 'src'

    @property
    def src(self) -> str | None:
        return self.local_settings.src

    @src.setter
    def src(self, value: str | None) -> None:
        self.local_settings.src = value


class ListNode(LeafNode):
    """List (sidebar) leaf: a sequence of ``{id, name}`` links."""

    __slots__ = ()

    type = NodeType.LIST
    content_field = 'entries'

    @property
    def entries(self) -> list[ListEntry]:
        return self.local_settings.entries or []

    @entries.setter
    def entries(self, value: Iterable[ListEntry | dict[str, Any]] | None) -> None:
        if value is None:
            self.local_settings.entries = None
            return
        self.local_settings.entries = [
            e if isinstance(e, ListEntry) else ListEntry.model_validate(e) for e in value
        ]


LEAF_CLASSES: dict[NodeType, type[LeafNode]] = {
    NodeType.TEXT: TextNode,
    NodeType.IMAGE: ImageNode,
    NodeType.LIST: ListNode,
}

NODE_CLASSES: dict[NodeType, type[PageNode]] = {
    NodeType.ROOT: RootNode,
    NodeType.ROW: RowNode,
    NodeType.COLUMN: ColumnNode,
    **LEAF_CLASSES,
}
