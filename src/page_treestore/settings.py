# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Style settings and the two-tier settings cascade.

Every document carries fully populated defaults (``GlobalSettings``) on its
root. Every leaf carries a sparse ``LocalSettings`` fragment. Reading the
settings of a leaf merges the two per field, at read time:

    >>> defaults = GlobalSettings()
    >>> local = LocalSettings(palette=PaletteOverride(text='#ff0000'))
    >>> effective = cascade(defaults, local)
    >>> effective.palette.text
    '#ff0000'
    >>> effective.styling.font_size == defaults.styling.font_size
    True

Persisted keys use the camelCase names of the stored format
(``onBrand``, ``fontSize``); Python attributes use snake_case.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .exceptions import InvalidValueError, UnknownSettingError

CATEGORIES = ('palette', 'styling')


class _SettingsModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra='ignore',
    )


class Palette(_SettingsModel):
    """Document-wide color palette."""

    brand: str = '#1d4ed8'
    accent: str = '#f59e0b'
    text: str = '#000000'
    background: str = '#ffffff'
    on_brand: str = Field(default='#ffffff', alias='onBrand')


class Styling(_SettingsModel):
    """Document-wide typography and spacing profile."""

    font_size: str = Field(default='16px', alias='fontSize')
    weight: str = '400'
    spacing: str = '1.5'
    radius: str = '4px'
    shadow: str = 'none'


class PaletteOverride(_SettingsModel):
    brand: Optional[str] = None
    accent: Optional[str] = None
    text: Optional[str] = None
    background: Optional[str] = None
    on_brand: Optional[str] = Field(default=None, alias='onBrand')


class StylingOverride(_SettingsModel):
    font_size: Optional[str] = Field(default=None, alias='fontSize')
    weight: Optional[str] = None
    spacing: Optional[str] = None
    radius: Optional[str] = None
    shadow: Optional[str] = None


class ListEntry(_SettingsModel):
    """One link of a list leaf.

    Stored as ``{"id": ..., "name": ...}``; ``label`` is accepted on input.
    """

    id: str
    name: str = Field(validation_alias=AliasChoices('name', 'label'))


class GlobalSettings(_SettingsModel):
    """Fully populated defaults held by the document root."""

    palette: Palette = Field(default_factory=Palette)
    styling: Styling = Field(default_factory=Styling)


class LocalSettings(_SettingsModel):
    """Sparse per-leaf override. Absent means "inherit"."""

    palette: Optional[PaletteOverride] = None
    styling: Optional[StylingOverride] = None
    src: Optional[str] = None
    entries: Optional[list[ListEntry]] = Field(default=None, alias='list')


class EffectiveSettings(_SettingsModel):
    """Result of the cascade for one leaf. Never stored."""

    palette: Palette
    styling: Styling
    src: Optional[str] = None
    entries: Optional[list[ListEntry]] = Field(default=None, alias='list')


_OVERRIDE_MODELS: dict[str, type[_SettingsModel]] = {
    'palette': PaletteOverride,
    'styling': StylingOverride,
}


def field_name(model: type[BaseModel], name: str) -> str:
    """Map a persisted key or attribute name to the model attribute name."""
    for attr, info in model.model_fields.items():
        if name == attr or name == info.alias:
            return attr
    raise UnknownSettingError(
        f"'{model.__name__}' has no setting '{name}'"
    )


def _check_category(category: str) -> None:
    if category not in CATEGORIES:
        raise UnknownSettingError(
            f"Unknown settings category '{category}'. "
            f"Valid categories: {', '.join(CATEGORIES)}"
        )


def _merge(default: _SettingsModel, override: _SettingsModel | None) -> Any:
    if override is None:
        return default.model_copy()
    values = default.model_dump()
    values.update(override.model_dump(exclude_none=True))
    return type(default).model_validate(values)


def cascade(defaults: GlobalSettings, local: LocalSettings) -> EffectiveSettings:
    """Merge document defaults with a leaf override, field by field.

    Args:
        defaults: The root's fully populated settings.
        local: The leaf's sparse override.

    Returns:
        A new EffectiveSettings; neither input is modified.
    """
    return EffectiveSettings(
        palette=_merge(defaults.palette, local.palette),
        styling=_merge(defaults.styling, local.styling),
        src=local.src,
        entries=[e.model_copy() for e in local.entries] if local.entries is not None else None,
    )


def set_override(local: LocalSettings, category: str, field: str, value: Any) -> None:
    """Set one field of one category on a leaf override.

    The category sub-object is created when absent. A rejected value
    leaves ``local`` unchanged.

    Raises:
        UnknownSettingError: If category or field does not exist.
        InvalidValueError: If value does not validate.
    """
    _check_category(category)
    model = _OVERRIDE_MODELS[category]
    attr = field_name(model, field)
    section = getattr(local, category)
    created = section is None
    if created:
        section = model()
    _assign(section, attr, value, f'{category}.{field}')
    if created:
        setattr(local, category, section)


def set_default(defaults: GlobalSettings, category: str, field: str, value: Any) -> None:
    """Set one field of one category on the document defaults.

    Raises:
        UnknownSettingError: If category or field does not exist.
        InvalidValueError: If value does not validate.
    """
    _check_category(category)
    section = getattr(defaults, category)
    attr = field_name(type(section), field)
    _assign(section, attr, value, f'{category}.{field}')


def _assign(model: BaseModel, attr: str, value: Any, label: str) -> None:
    try:
        setattr(model, attr, value)
    except ValidationError as exc:
        raise InvalidValueError(f"Invalid value {value!r} for '{label}'") from exc
