"""
PartScript Device Contexts.

Devices that scripts are read from and applied to.
"""

from __future__ import annotations

from partscript.context.base import DEFAULT_GRAIN, DeviceContext, LabelItem, partname
from partscript.context.virtual import VirtualDisk

__all__ = [
    "DEFAULT_GRAIN",
    "DeviceContext",
    "LabelItem",
    "VirtualDisk",
    "partname",
]
