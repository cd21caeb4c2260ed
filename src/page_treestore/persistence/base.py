# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""KeyedStore - abstract base class for plain tree stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterator

PlainTree = dict[str, Any]


class KeyedStore(ABC):
    """A collection of plain trees addressed by string keys.

    Keys are document ids for the document store and template names for
    the template store. Every call completes or fails as a whole; there is
    no locking and the last writer wins.

    Subclasses implement save/load/clear/keys:
    - save(key, plain): upsert, other keys untouched
    - load(key): a copy of the stored tree, or None when absent
    - clear(key): remove one key, a missing key is not an error
    - keys(): stored keys in insertion order
    """

    @abstractmethod
    def save(self, key: str, plain: PlainTree) -> None:
        """Store plain under key, replacing any previous entry."""

    @abstractmethod
    def load(self, key: str) -> PlainTree | None:
        """Return the tree stored under key, or None."""

    @abstractmethod
    def clear(self, key: str) -> None:
        """Remove the entry for key only."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return the stored keys."""

    def __contains__(self, key: object) -> bool:
        return key in self.keys()

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.keys())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.keys()})"
