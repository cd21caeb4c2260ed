# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""In-memory KeyedStore."""

from __future__ import annotations

import copy
import logging

from .base import KeyedStore, PlainTree

logger = logging.getLogger(__name__)


class MemoryStore(KeyedStore):
    """KeyedStore backed by a dict.

    Trees are deep-copied in and out, so callers never share state with
    the store.
    """

    def __init__(self) -> None:
        self._entries: dict[str, PlainTree] = {}

    def save(self, key: str, plain: PlainTree) -> None:
        self._entries[key] = copy.deepcopy(plain)
        logger.debug("Saved '%s' in memory store", key)

    def load(self, key: str) -> PlainTree | None:
        entry = self._entries.get(key)
        return copy.deepcopy(entry) if entry is not None else None

    def clear(self, key: str) -> None:
        self._entries.pop(key, None)
        logger.debug("Cleared '%s' in memory store", key)

    def keys(self) -> list[str]:
        return list(self._entries)
