# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Page TreeStore - the document tree engine of a visual page builder.

A page is a tree of rows, columns and content leaves. This library holds
that tree, edits it, resolves leaf styles against document defaults, and
turns it into plain data for storage and back.
"""

__version__ = "0.1.0"

from .catalog import Catalog, ContentTemplate, LayoutPreset, default_catalog
from .document import Document
from .exceptions import (
    DetachedNodeError,
    InvalidTargetError,
    InvalidValueError,
    NodeNotFoundError,
    PageTreeError,
    RehydrationError,
    StorageError,
    UnknownSettingError,
)
from .mutations import DocumentEditor
from .node import (
    ColumnNode,
    ImageNode,
    LeafNode,
    ListNode,
    NodeType,
    PageNode,
    RootNode,
    RowNode,
    TextNode,
)
from .persistence import JsonFileStore, KeyedStore, MemoryStore
from .serialization import from_plain, node_from_plain, node_to_plain, to_plain
from .settings import (
    EffectiveSettings,
    GlobalSettings,
    ListEntry,
    LocalSettings,
    Palette,
    PaletteOverride,
    Styling,
    StylingOverride,
    cascade,
)
from .subscription import TreeChange
from .workspace import Workspace

__all__ = [
    # Core classes
    "Document",
    "DocumentEditor",
    "Workspace",
    # Nodes
    "NodeType",
    "PageNode",
    "RootNode",
    "RowNode",
    "ColumnNode",
    "LeafNode",
    "TextNode",
    "ImageNode",
    "ListNode",
    # Catalog
    "Catalog",
    "ContentTemplate",
    "LayoutPreset",
    "default_catalog",
    # Settings
    "GlobalSettings",
    "LocalSettings",
    "EffectiveSettings",
    "Palette",
    "PaletteOverride",
    "Styling",
    "StylingOverride",
    "ListEntry",
    "cascade",
    # Serialization
    "to_plain",
    "from_plain",
    "node_to_plain",
    "node_from_plain",
    # Persistence
    "KeyedStore",
    "MemoryStore",
    "JsonFileStore",
    # Events
    "TreeChange",
    # Exceptions
    "PageTreeError",
    "DetachedNodeError",
    "NodeNotFoundError",
    "InvalidTargetError",
    "UnknownSettingError",
    "InvalidValueError",
    "RehydrationError",
    "StorageError",
]
