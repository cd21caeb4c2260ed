# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""JSON file KeyedStore.

The whole collection lives in one file as ``{key: plain_tree, ...}``, the
same layout a browser build keeps under a single storage key. Each write
rewrites the file through a temporary file and ``os.replace``, so a
failed write never leaves a half-written collection behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from ..exceptions import StorageError
from .base import KeyedStore, PlainTree

logger = logging.getLogger(__name__)


class JsonFileStore(KeyedStore):
    """KeyedStore persisted to a single JSON file.

    Args:
        path: File holding the collection. Missing parent directories are
            created on first write; a missing file reads as empty.
        indent: JSON indentation, None for compact output.
    """

    def __init__(self, path: str | Path, indent: int | None = 2) -> None:
        self.path = Path(path)
        self.indent = indent

    def __repr__(self) -> str:
        return f"JsonFileStore({str(self.path)!r})"

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(
                f"{self.path} must hold a JSON object, not {type(data).__name__}"
            )
        return data

    def _write(self, data: dict[str, Any]) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                'w',
                encoding='utf-8',
                dir=self.path.parent,
                prefix=f'.{self.path.name}.',
                suffix='.tmp',
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(data, tmp, indent=self.indent, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc

    def save(self, key: str, plain: PlainTree) -> None:
        data = self._read()
        data[key] = plain
        self._write(data)
        logger.debug("Saved '%s' to %s", key, self.path)

    def load(self, key: str) -> PlainTree | None:
        return self._read().get(key)

    def clear(self, key: str) -> None:
        data = self._read()
        if key not in data:
            return
        del data[key]
        self._write(data)
        logger.debug("Cleared '%s' from %s", key, self.path)

    def keys(self) -> list[str]:
        return list(self._read())
