# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Element catalog - the palette of things that can be dropped on a page.

Two kinds of elements exist:
- LayoutPreset: a row shape, dropped on the root to insert a row
- ContentTemplate: an unattached leaf, dropped on a column to create a leaf
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .node import NodeType


@dataclass(frozen=True)
class LayoutPreset:
    """Row shape offered by the palette, e.g. '1|1' for two columns."""

    columns: int
    label: str

    def __post_init__(self) -> None:
        if self.columns < 1:
            raise ValueError(f"A row needs at least one column, got {self.columns}")


@dataclass(frozen=True)
class ContentTemplate:
    """Leaf blueprint with no parent and no id.

    Placing a template creates a new leaf of ``type`` with a fresh id and no
    style overrides. ``src`` and ``entries`` seed image and list content.
    """

    type: NodeType
    text: str = ''
    src: str | None = None
    entries: tuple[dict[str, Any], ...] = ()

    def __post_init__(self) -> None:
        node_type = NodeType(self.type)
        if not node_type.is_leaf:
            raise ValueError(f"'{node_type}' is not a content type")
        object.__setattr__(self, 'type', node_type)


@dataclass
class Catalog:
    """The editor's element palette."""

    layouts: list[LayoutPreset] = field(default_factory=list)
    contents: list[ContentTemplate] = field(default_factory=list)

    def register(
        self,
        layouts: list[LayoutPreset] | None = None,
        contents: list[ContentTemplate] | None = None,
    ) -> None:
        """Replace the offered layouts and/or contents."""
        if layouts is not None:
            self.layouts = list(layouts)
        if contents is not None:
            self.contents = list(contents)

    def layout(self, label: str) -> LayoutPreset:
        """Get a layout preset by label.

        Raises:
            KeyError: If no preset has this label.
        """
        for preset in self.layouts:
            if preset.label == label:
                return preset
        raise KeyError(f"Layout '{label}' not found")

    def content(self, node_type: NodeType | str) -> ContentTemplate:
        """Get the first content template of a type.

        Raises:
            KeyError: If no template has this type.
        """
        wanted = NodeType(node_type)
        for template in self.contents:
            if template.type is wanted:
                return template
        raise KeyError(f"Content '{wanted}' not found")


def default_catalog() -> Catalog:
    """Return the stock palette: three row shapes and three contents."""
    return Catalog(
        layouts=[
            LayoutPreset(1, '1'),
            LayoutPreset(2, '1|1'),
            LayoutPreset(3, '1|1|1'),
        ],
        contents=[
            ContentTemplate(NodeType.TEXT, 'Text'),
            ContentTemplate(NodeType.IMAGE, 'Image'),
            ContentTemplate(NodeType.LIST, 'Sidebar'),
        ],
    )
