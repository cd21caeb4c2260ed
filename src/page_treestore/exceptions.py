# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Page TreeStore exceptions."""

from __future__ import annotations


class PageTreeError(Exception):
    """Base exception for page tree errors."""

    pass


class DetachedNodeError(PageTreeError):
    """Raised when an operation needs a parent and the node has none.

    Removing the root, or removing a node twice, is a caller bug.
    """

    pass


class NodeNotFoundError(PageTreeError, KeyError):
    """Raised when a node id is not present in the document."""

    pass


class InvalidTargetError(PageTreeError):
    """Raised when a mutation targets the wrong kind of node or position."""

    pass


class UnknownSettingError(PageTreeError):
    """Raised when a settings category or field does not exist."""

    pass


class RehydrationError(PageTreeError):
    """Raised when stored plain data cannot be turned back into a tree."""

    pass


class StorageError(PageTreeError):
    """Raised when the storage backend fails to read or write."""

    pass


class InvalidValueError(PageTreeError, ValueError):
    """Raised when a setting or content value fails validation."""

    pass
