"""
PartScript Label Drivers.

Provides the partition table drivers a script's ``label:`` header refers
to, and a registry to look them up by name.
"""

from __future__ import annotations

from partscript.labels.base import (
    SCRIPT_PARSE_FLAGS,
    TYPE_ALIASES,
    LabelDriver,
    TypeParseFlags,
)
from partscript.labels.dos import DosLabel
from partscript.labels.gpt import GptLabel

_LABEL_ALIASES = {"mbr": "dos", "msdos": "dos"}

_DRIVERS: dict[str, LabelDriver] = {
    driver.name: driver for driver in (DosLabel(), GptLabel())
}


def get_label_driver(name: str | None) -> LabelDriver | None:
    """Find a label driver by (case-insensitive) name."""
    if not name:
        return None
    key = name.strip().lower()
    key = _LABEL_ALIASES.get(key, key)
    return _DRIVERS.get(key)


def list_label_names() -> list[str]:
    """Names of all registered label drivers."""
    return list(_DRIVERS)


def list_label_drivers() -> list[LabelDriver]:
    return list(_DRIVERS.values())


__all__ = [
    "DosLabel",
    "GptLabel",
    "LabelDriver",
    "SCRIPT_PARSE_FLAGS",
    "TYPE_ALIASES",
    "TypeParseFlags",
    "get_label_driver",
    "list_label_drivers",
    "list_label_names",
]
