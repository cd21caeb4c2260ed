# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""
Configuration for Page TreeStore.

Loaded from:
1. Defaults (this file)
2. Config file ($XDG_CONFIG_HOME/page-treestore/config.toml) if it exists
3. Environment variables (PAGE_TREESTORE_*) override the file

Example config.toml::

    [storage]
    backend = "json"
    directory = "~/sites/data"

    [defaults.palette]
    brand = "#0f766e"

    [defaults.styling]
    fontSize = "18px"
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .exceptions import UnknownSettingError
from .settings import GlobalSettings, Palette, Styling, field_name

logger = logging.getLogger(__name__)

BACKENDS = ('memory', 'json')


def _default_data_dir() -> Path:
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / "page-treestore"
    return Path.home() / ".local" / "share" / "page-treestore"


@dataclass
class DefaultsConfig:
    """Overrides for the defaults given to every new document.

    Keys are palette/styling field names; missing keys keep the built-in
    values of Palette and Styling.
    """
    palette: dict[str, str] = field(default_factory=dict)
    styling: dict[str, str] = field(default_factory=dict)

    def global_settings(self) -> GlobalSettings:
        return GlobalSettings(
            palette=Palette.model_validate(self.palette),
            styling=Styling.model_validate(self.styling),
        )


@dataclass
class StorageConfig:
    """Where documents and templates are kept."""
    backend: str = "memory"  # memory | json
    directory: Path = field(default_factory=_default_data_dir)
    documents_file: str = "documents.json"
    templates_file: str = "templates.json"

    @property
    def documents_path(self) -> Path:
        return self.directory / self.documents_file

    @property
    def templates_path(self) -> Path:
        return self.directory / self.templates_file


@dataclass
class Config:
    """Root config with all settings."""
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)


def get_config_path() -> Path:
    """Get config file path, respecting PAGE_TREESTORE_CONFIG and XDG."""
    explicit = os.environ.get("PAGE_TREESTORE_CONFIG")
    if explicit:
        return Path(explicit).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "page-treestore" / "config.toml"
    return Path.home() / ".config" / "page-treestore" / "config.toml"


def load_config(path: Path | None = None) -> Config:
    """Load config from file if it exists, then apply env overrides."""
    config = Config()
    path = path or get_config_path()

    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            logger.warning("Ignoring unreadable config file %s: %s", path, exc)
        else:
            config = _apply_toml(config, data)

    return _apply_env(config)


def _apply_toml(config: Config, data: dict[str, Any]) -> Config:
    """Apply toml data to config."""
    if "storage" in data:
        s = data["storage"]
        if "backend" in s:
            config.storage.backend = str(s["backend"])
        if "directory" in s:
            config.storage.directory = Path(s["directory"]).expanduser()
        if "documents_file" in s:
            config.storage.documents_file = str(s["documents_file"])
        if "templates_file" in s:
            config.storage.templates_file = str(s["templates_file"])

    if "defaults" in data:
        d = data["defaults"]
        for category, model in (("palette", Palette), ("styling", Styling)):
            overrides = getattr(config.defaults, category)
            for key, value in d.get(category, {}).items():
                try:
                    overrides[field_name(model, key)] = str(value)
                except UnknownSettingError:
                    logger.warning("Ignoring unknown %s setting '%s' in config", category, key)

    return config


def _apply_env(config: Config) -> Config:
    """Apply environment variable overrides."""
    env_map: dict[str, str] = {
        "PAGE_TREESTORE_BACKEND": "backend",
        "PAGE_TREESTORE_DOCUMENTS_FILE": "documents_file",
        "PAGE_TREESTORE_TEMPLATES_FILE": "templates_file",
    }
    for env_key, attr in env_map.items():
        val = os.environ.get(env_key)
        if val is not None:
            setattr(config.storage, attr, val)

    directory = os.environ.get("PAGE_TREESTORE_DIR")
    if directory is not None:
        config.storage.directory = Path(directory).expanduser()

    # PAGE_TREESTORE_PALETTE_BRAND, PAGE_TREESTORE_STYLING_FONT_SIZE, ...
    for category, model in (("palette", Palette), ("styling", Styling)):
        overrides = getattr(config.defaults, category)
        for name in model.model_fields:
            val = os.environ.get(f"PAGE_TREESTORE_{category.upper()}_{name.upper()}")
            if val is not None:
                overrides[name] = val

    return config


# Module-level config instance, loaded once on first use
_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the cached config so the next get_config() reloads it."""
    global _config
    _config = None
