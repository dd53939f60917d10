"""
GPT label driver.
"""

from __future__ import annotations

import re
import uuid

from partscript.core.models import LabelKind, PartitionType
from partscript.labels.base import LabelDriver

GPT_ENTRY_SIZE = 128
GPT_NPARTITIONS_DEFAULT = 128

_GUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def _t(guid: str, name: str) -> PartitionType:
    return PartitionType(typestr=guid, name=name)


GPT_PARTTYPES: tuple[PartitionType, ...] = (
    _t("C12A7328-F81F-11D2-BA4B-00A0C93EC93B", "EFI System"),
    _t("024DEE41-33E7-11D3-9D69-0008C781F39F", "MBR partition scheme"),
    _t("21686148-6449-6E6F-744E-656564454649", "BIOS boot"),
    _t("E3C9E316-0B5C-4DB8-817D-F92DF00215AE", "Microsoft reserved"),
    _t("EBD0A0A2-B9E5-4433-87C0-68B6B72699C7", "Microsoft basic data"),
    _t("DE94BBA4-06D1-4D40-A16A-BFD50179D6AC", "Windows recovery environment"),
    _t("0657FD6D-A4AB-43C4-84E5-0933C84B4F4F", "Linux swap"),
    _t("0FC63DAF-8483-4772-8E79-3D69D8477DE4", "Linux filesystem"),
    _t("3B8F8425-20E0-4F3B-907F-1A25A76F98E8", "Linux server data"),
    _t("44479540-F297-41B2-9AF7-D131D5F0458A", "Linux root (x86)"),
    _t("4F68BCE3-E8CD-4DB1-96E7-FBCAF984B709", "Linux root (x86-64)"),
    _t("B921B045-1DF0-41C3-AF44-4C6F280D3FAE", "Linux root (ARM-64)"),
    _t("A19D880F-05FC-4D3B-A006-743F0F84911E", "Linux RAID"),
    _t("933AC7E1-2EB4-4F13-B844-0E14E2AEF915", "Linux home"),
    _t("E6D6D379-F507-44C2-A23C-238F2A3DF928", "Linux LVM"),
    _t("BC13C2FF-59E6-4262-A352-B275FD6F7172", "Linux extended boot"),
    _t("48465300-0000-11AA-AA11-00306543ECAC", "Apple HFS/HFS+"),
    _t("516E7CB4-6ECF-11D6-8FF8-00022D09712B", "FreeBSD data"),
)


class GptLabel(LabelDriver):
    """GUID partition table."""

    parttypes = GPT_PARTTYPES

    @property
    def name(self) -> str:
        return "gpt"

    @property
    def kind(self) -> LabelKind:
        return LabelKind.GPT

    @property
    def max_partitions(self) -> int:
        return GPT_NPARTITIONS_DEFAULT

    @property
    def default_type(self) -> PartitionType:
        return self.get_parttype_from_guid("0FC63DAF-8483-4772-8E79-3D69D8477DE4")  # type: ignore[return-value]

    def get_parttype_from_guid(self, guid: str) -> PartitionType | None:
        upper = guid.upper()
        for t in self.parttypes:
            if t.typestr == upper:
                return t
        return None

    def parse_type_data(self, data: str) -> PartitionType | None:
        text = data.strip()
        if not _GUID_RE.match(text):
            return None
        known = self.get_parttype_from_guid(text)
        if known is not None:
            return known
        return PartitionType(typestr=text.upper(), name="unknown", is_unknown=True)

    def generate_label_id(self) -> str:
        return str(uuid.uuid4()).upper()

    @staticmethod
    def entry_array_sectors(sector_size: int, npartitions: int) -> int:
        return -(-npartitions * GPT_ENTRY_SIZE // sector_size)

    def first_usable_lba(self, sector_size: int, npartitions: int) -> int:
        # protective MBR + primary header + entry array
        return 2 + self.entry_array_sectors(sector_size, npartitions)

    def last_usable_lba(self, total_sectors: int, sector_size: int, npartitions: int) -> int:
        # backup entry array + backup header at the end of the disk
        return total_sectors - 2 - self.entry_array_sectors(sector_size, npartitions)
