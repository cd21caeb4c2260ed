# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for the page tree tests."""

import pytest

from page_treestore import ContentTemplate, Document, DocumentEditor, NodeType


def build_page(document_id='home'):
    """Three rows (1, 2 and 3 columns), one leaf of each kind, some overrides."""
    doc = Document(document_id)
    editor = DocumentEditor(doc)
    editor.insert_row(1)
    second = editor.insert_row(2)
    third = editor.insert_row(3)

    left, right = doc.children(second)
    text = editor.place_leaf(ContentTemplate(NodeType.TEXT, 'Hello'), left)
    editor.update_local_setting(text, 'palette', 'text', '#ff0000')
    editor.update_local_setting(text, 'styling', 'fontSize', '24px')
    editor.place_leaf(ContentTemplate(NodeType.IMAGE, 'Image', src='/logo.png'), right)
    editor.place_leaf(
        ContentTemplate(NodeType.LIST, 'Sidebar', entries=({'id': 'about', 'name': 'About'},)),
        doc.children(third)[2],
    )
    editor.update_global_setting('palette', 'brand', '#123456')
    return doc


@pytest.fixture
def page():
    return build_page()


@pytest.fixture
def editor():
    return DocumentEditor(Document('home'))


@pytest.fixture
def make_page():
    return build_page
