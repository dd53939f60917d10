"""
DOS (MBR) label driver.
"""

from __future__ import annotations

import random

from partscript.core.models import LabelKind, PartitionType
from partscript.labels.base import LabelDriver


def _t(code: int, name: str) -> PartitionType:
    return PartitionType(code=code, name=name)


DOS_PARTTYPES: tuple[PartitionType, ...] = (
    _t(0x00, "Empty"),
    _t(0x01, "FAT12"),
    _t(0x04, "FAT16 <32M"),
    _t(0x05, "Extended"),
    _t(0x06, "FAT16"),
    _t(0x07, "HPFS/NTFS/exFAT"),
    _t(0x0B, "W95 FAT32"),
    _t(0x0C, "W95 FAT32 (LBA)"),
    _t(0x0E, "W95 FAT16 (LBA)"),
    _t(0x0F, "W95 Ext'd (LBA)"),
    _t(0x27, "Hidden NTFS WinRE"),
    _t(0x82, "Linux swap / Solaris"),
    _t(0x83, "Linux"),
    _t(0x85, "Linux extended"),
    _t(0x8E, "Linux LVM"),
    _t(0xA5, "FreeBSD"),
    _t(0xA6, "OpenBSD"),
    _t(0xA9, "NetBSD"),
    _t(0xAF, "HFS / HFS+"),
    _t(0xEA, "Linux extended boot"),
    _t(0xEE, "GPT"),
    _t(0xEF, "EFI (FAT-12/16/32)"),
    _t(0xFD, "Linux raid autodetect"),
)


class DosLabel(LabelDriver):
    """Master boot record partition table."""

    parttypes = DOS_PARTTYPES

    @property
    def name(self) -> str:
        return "dos"

    @property
    def kind(self) -> LabelKind:
        return LabelKind.DOS

    @property
    def max_partitions(self) -> int:
        return 4

    @property
    def default_type(self) -> PartitionType:
        return self.get_parttype_from_code(0x83)  # type: ignore[return-value]

    def get_parttype_from_code(self, code: int) -> PartitionType | None:
        for t in self.parttypes:
            if t.code == code:
                return t
        return None

    def parse_type_data(self, data: str) -> PartitionType | None:
        text = data.strip()
        if text[:2].lower() == "0x":
            text = text[2:]
        if not text:
            return None
        try:
            code = int(text, 16)
        except ValueError:
            return None
        if not 0 <= code <= 0xFF:
            return None
        known = self.get_parttype_from_code(code)
        if known is not None:
            return known
        return PartitionType(code=code, name="unknown", is_unknown=True)

    def generate_label_id(self) -> str:
        return f"0x{random.getrandbits(32):08x}"
