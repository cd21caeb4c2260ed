# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Workspace - explicit handle on the document and template stores.

A Workspace is created once at startup and passed to whatever needs to
open, save or seed documents. Nothing in this package keeps a hidden
global document, so several workspaces (or tests) can run side by side.

Example:
    >>> ws = Workspace()
    >>> doc = ws.open('home')          # empty document when nothing is stored
    >>> DocumentEditor(doc).insert_row(2)
    >>> ws.save(doc)
    >>> ws.save_template('two-columns', doc)
    >>> landing = ws.apply_template('two-columns', 'landing')
    >>> landing.id
    'landing'
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .catalog import Catalog, default_catalog
from .config import BACKENDS, Config, get_config
from .document import Document
from .exceptions import RehydrationError
from .mutations import DocumentEditor
from .persistence import JsonFileStore, KeyedStore, MemoryStore
from .persistence.base import PlainTree
from .serialization import from_plain, to_plain
from .settings import GlobalSettings

logger = logging.getLogger(__name__)


def _retarget(plain: Any, document_id: str) -> dict[str, Any]:
    """Return plain root data with its id replaced by document_id."""
    if not isinstance(plain, Mapping):
        raise RehydrationError(f"Plain document must be a mapping, not {type(plain).__name__}")
    retargeted = dict(plain)
    retargeted['id'] = document_id
    return retargeted


class Workspace:
    """Documents and templates, each in its own KeyedStore.

    Args:
        documents: Store keyed by document id. Defaults to a MemoryStore.
        templates: Store keyed by template name. Defaults to a MemoryStore.
        defaults: Settings given to new empty documents.
        catalog: The element palette offered to the editor.
    """

    def __init__(
        self,
        documents: KeyedStore | None = None,
        templates: KeyedStore | None = None,
        defaults: GlobalSettings | None = None,
        catalog: Catalog | None = None,
    ) -> None:
        self.documents = documents if documents is not None else MemoryStore()
        self.templates = templates if templates is not None else MemoryStore()
        self.defaults = defaults if defaults is not None else GlobalSettings()
        self.catalog = catalog if catalog is not None else default_catalog()

    def __repr__(self) -> str:
        return f"Workspace(documents={self.documents!r}, templates={self.templates!r})"

    @classmethod
    def from_config(cls, config: Config | None = None) -> Workspace:
        """Build a workspace from a Config (the global one when None).

        Raises:
            ValueError: If the configured backend is unknown.
        """
        config = config or get_config()
        storage = config.storage
        if storage.backend == 'memory':
            documents: KeyedStore = MemoryStore()
            templates: KeyedStore = MemoryStore()
        elif storage.backend == 'json':
            documents = JsonFileStore(storage.documents_path)
            templates = JsonFileStore(storage.templates_path)
        else:
            raise ValueError(
                f"Unknown storage backend '{storage.backend}'. Valid backends: {', '.join(BACKENDS)}"
            )
        return cls(documents, templates, defaults=config.defaults.global_settings())

    # ==================== Documents ====================

    def new_document(self, document_id: str) -> Document:
        """Return an empty document with the workspace defaults."""
        return Document(document_id, self.defaults.model_copy(deep=True))

    def load(self, document_id: str) -> Document | None:
        """Rehydrate a stored document, or None if nothing is stored.

        Raises:
            RehydrationError: If the stored entry is not a valid tree.
        """
        plain = self.documents.load(document_id)
        if plain is None:
            return None
        if isinstance(plain, Mapping) and plain.get('id') != document_id:
            logger.warning(
                "Stored document '%s' has root id %r, using the key", document_id, plain.get('id')
            )
            plain = _retarget(plain, document_id)
        return from_plain(plain)

    def open(self, document_id: str) -> Document:
        """Load a document, falling back to an empty one."""
        document = self.load(document_id)
        if document is None:
            logger.debug("No stored document '%s', starting empty", document_id)
            return self.new_document(document_id)
        return document

    def edit(self, document_id: str) -> DocumentEditor:
        """Open a document and return an editor bound to it."""
        return DocumentEditor(self.open(document_id))

    def save(self, document: Document) -> PlainTree:
        """Serialize and store a document under its id.

        Returns:
            The plain tree that was stored.
        """
        plain = to_plain(document)
        self.documents.save(document.id, plain)
        logger.debug("Saved document '%s' (%d nodes)", document.id, len(document))
        return plain

    def reset(self, document_id: str) -> Document:
        """Drop the stored document and return a fresh empty one."""
        self.documents.clear(document_id)
        return self.new_document(document_id)

    def delete(self, document_id: str) -> None:
        self.documents.clear(document_id)

    def list_documents(self) -> list[str]:
        return self.documents.keys()

    # ==================== Templates ====================

    def save_template(self, name: str, document: Document) -> PlainTree:
        """Store a snapshot of document under a template name."""
        plain = to_plain(document)
        self.templates.save(name, plain)
        logger.debug("Saved template '%s' from document '%s'", name, document.id)
        return plain

    def load_template(self, name: str) -> PlainTree | None:
        """Return the stored snapshot, or None if there is none."""
        return self.templates.load(name)

    def delete_template(self, name: str) -> None:
        self.templates.clear(name)

    def list_templates(self) -> list[str]:
        return self.templates.keys()

    def apply_template(self, name: str, document_id: str) -> Document | None:
        """Seed a document from a template.

        The root takes document_id; every other id, content and setting is
        kept verbatim. The result is not saved.

        Returns:
            The seeded document, or None if the template does not exist.

        Raises:
            RehydrationError: If the stored template is not a valid tree.
        """
        plain = self.templates.load(name)
        if plain is None:
            return None
        return from_plain(_retarget(plain, document_id))
