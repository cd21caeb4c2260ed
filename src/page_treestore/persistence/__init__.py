# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Persistence package - key-addressed stores for plain page trees.

Available stores:
- MemoryStore: process-local dict, for tests and previews
- JsonFileStore: one JSON file holding a whole keyed collection

Example:
    >>> from page_treestore.persistence import JsonFileStore
    >>> store = JsonFileStore('data/documents.json')
    >>> store.save('home', to_plain(document))
    >>> store.load('missing') is None
    True
"""

from .base import KeyedStore
from .json_file import JsonFileStore
from .memory import MemoryStore

__all__ = ["KeyedStore", "MemoryStore", "JsonFileStore"]
