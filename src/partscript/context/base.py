"""
PartScript Device Context Base.

Defines the abstract interface of the device a script is read from or
applied to: geometry, the current disk label, and the label/table
mutations the apply engine performs.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import TYPE_CHECKING

from partscript.labels import LabelDriver, get_label_driver

if TYPE_CHECKING:
    from partscript.core.models import Partition, Table
    from partscript.script.script import Script

DEFAULT_GRAIN = 2048 * 512


class LabelItem(Enum):
    """Label specific values a context can report."""

    FIRST_LBA = auto()
    LAST_LBA = auto()
    LABEL_ID = auto()


def partname(device: str, partno: int) -> str:
    """
    Device node name of partition ``partno`` (1-based) on ``device``.

    A ``p`` separator is used when the device name ends in a digit
    (``/dev/nvme0n1p1``, ``/dev/loop0p1``); device-mapper names use
    ``-part``.
    """
    if device.startswith("/dev/mapper/"):
        return f"{device}-part{partno}"
    if re.search(r"\d$", device):
        return f"{device}p{partno}"
    return f"{device}{partno}"


class DeviceContext(ABC):
    """Abstract base class for devices scripts are applied to."""

    def __init__(self) -> None:
        self._script: Script | None = None

    # ==================== Geometry ====================

    @property
    @abstractmethod
    def sector_size(self) -> int:
        """Logical sector size in bytes."""

    @property
    @abstractmethod
    def grain_size(self) -> int:
        """Allocation granularity in bytes."""

    @property
    @abstractmethod
    def dev_path(self) -> str | None:
        """Device path, if the context is backed by a named device."""

    # ==================== Script binding ====================

    @property
    def script(self) -> Script | None:
        """Script whose headers override label defaults."""
        return self._script

    @script.setter
    def script(self, script: Script | None) -> None:
        self._script = script

    # ==================== Label ====================

    @property
    @abstractmethod
    def label(self) -> LabelDriver | None:
        """Driver of the label currently on the device, if any."""

    def get_label(self, name: str | None = None) -> LabelDriver | None:
        """Driver for ``name``, or the current label when ``name`` is None."""
        if name is None:
            return self.label
        return get_label_driver(name)

    def is_labeled(self) -> bool:
        return self.label is not None

    @property
    @abstractmethod
    def npartitions(self) -> int:
        """Number of partition entries of the current label."""

    @abstractmethod
    def create_disklabel(self, name: str) -> None:
        """Replace the on-device label with a new empty one of type ``name``."""

    @abstractmethod
    def gpt_set_npartitions(self, entries: int) -> None:
        """Resize the GPT entry array."""

    @abstractmethod
    def get_disklabel_item(self, item: LabelItem) -> int | str:
        """Label specific value such as the first usable LBA."""

    @abstractmethod
    def get_disklabel_id(self) -> str | None:
        """Disk identifier of the current label."""

    # ==================== Partitions ====================

    @abstractmethod
    def apply_table(self, table: Table) -> None:
        """Add every partition of ``table`` to the current label."""

    @abstractmethod
    def get_partitions(self) -> list[Partition]:
        """Partitions of the current label, ordered by number."""

    # ==================== User overrides ====================

    @abstractmethod
    def save_user_grain(self, grain: int) -> None:
        """Remember a user-requested allocation granularity (bytes)."""

    @abstractmethod
    def has_user_device_properties(self) -> bool:
        """Whether user overrides are pending."""

    @abstractmethod
    def apply_user_device_properties(self) -> None:
        """Make pending user overrides effective."""
