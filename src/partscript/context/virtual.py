"""
In-memory device context.

VirtualDisk models a disk of a given size and sector size with a single
partition table. It performs the same layout decisions a label driver
makes when a script is applied: default partition numbers, default start
and size, and grain alignment of byte-sized partitions.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from pathlib import Path

from partscript.context.base import DEFAULT_GRAIN, DeviceContext, LabelItem
from partscript.core.errors import InvalidArgument, Unresolvable
from partscript.core.logging import get_logger
from partscript.core.models import LabelKind, Partition, Table
from partscript.labels import LabelDriver

logger = get_logger(__name__)

DOS_MAX_SECTORS = 2**32


class VirtualDisk(DeviceContext):
    """A disk that only exists in memory."""

    def __init__(
        self,
        size_bytes: int,
        sector_size: int = 512,
        dev_path: str | None = None,
        grain_size: int = DEFAULT_GRAIN,
    ) -> None:
        super().__init__()
        if size_bytes <= 0:
            raise InvalidArgument(f"invalid disk size: {size_bytes}")
        if sector_size < 512 or sector_size & (sector_size - 1):
            raise InvalidArgument(f"invalid sector size: {sector_size}")

        self._size_bytes = size_bytes
        self._sector_size = sector_size
        self._grain_size = max(grain_size, sector_size)
        self._dev_path = dev_path

        self._label: LabelDriver | None = None
        self._label_id: str | None = None
        self._npartitions = 0
        self._first_lba = 0
        self._last_lba = 0
        self._partitions: dict[int, Partition] = {}

        self._user_grain: int | None = None
        self._user_sector_size: int | None = None

    @classmethod
    def from_image(cls, path: str | Path, sector_size: int = 512) -> VirtualDisk:
        """Virtual disk sized after an existing image file."""
        image = Path(path)
        return cls(image.stat().st_size, sector_size=sector_size, dev_path=str(image))

    def __repr__(self) -> str:
        label = self._label.name if self._label else None
        return f"<VirtualDisk {self._dev_path or '-'} {self._size_bytes}B label={label}>"

    # ==================== Geometry ====================

    @property
    def sector_size(self) -> int:
        return self._sector_size

    @property
    def grain_size(self) -> int:
        return self._grain_size

    @property
    def dev_path(self) -> str | None:
        return self._dev_path

    @property
    def size_bytes(self) -> int:
        return self._size_bytes

    @property
    def total_sectors(self) -> int:
        return self._size_bytes // self._sector_size

    @property
    def grain_sectors(self) -> int:
        return max(1, self._grain_size // self._sector_size)

    # ==================== User overrides ====================

    def set_user_sector_size(self, sector_size: int) -> None:
        if sector_size < 512 or sector_size & (sector_size - 1):
            raise InvalidArgument(f"invalid sector size: {sector_size}")
        self._user_sector_size = sector_size

    def save_user_grain(self, grain: int) -> None:
        if grain < 512 or grain % 512:
            raise Unresolvable(f"invalid grain size: {grain}")
        self._user_grain = grain

    def has_user_device_properties(self) -> bool:
        return self._user_grain is not None or self._user_sector_size is not None

    def apply_user_device_properties(self) -> None:
        if self._user_sector_size is not None:
            self._sector_size = self._user_sector_size
        if self._user_grain is not None:
            self._grain_size = self._user_grain
        self._grain_size = max(self._grain_size, self._sector_size)
        logger.debug(
            "User device properties applied",
            sector_size=self._sector_size,
            grain=self._grain_size,
        )

    # ==================== Label ====================

    @property
    def label(self) -> LabelDriver | None:
        return self._label

    @property
    def npartitions(self) -> int:
        return self._npartitions

    def _require_label(self) -> LabelDriver:
        if self._label is None:
            raise InvalidArgument("device has no partition table")
        return self._label

    def _script_header(self, name: str) -> str | None:
        return self.script.get_header(name) if self.script is not None else None

    def _header_lba(self, name: str) -> int | None:
        value = self._script_header(name)
        if value is None:
            return None
        if not value.isdigit():
            raise InvalidArgument(f"invalid {name} header: {value!r}")
        return int(value)

    def _update_usable_range(self) -> None:
        label = self._require_label()
        first = label.first_usable_lba(self._sector_size, self._npartitions)
        last = label.last_usable_lba(self.total_sectors, self._sector_size, self._npartitions)

        if label.kind == LabelKind.GPT:
            # a script may narrow the usable area, never widen it
            wanted_first = self._header_lba("first-lba")
            wanted_last = self._header_lba("last-lba")
            if wanted_first is not None:
                if not first <= wanted_first <= last:
                    raise InvalidArgument(f"first-lba {wanted_first} out of range")
                first = wanted_first
            if wanted_last is not None:
                if not first <= wanted_last <= last:
                    raise InvalidArgument(f"last-lba {wanted_last} out of range")
                last = wanted_last

        if last < first:
            raise Unresolvable("device is too small for a partition table")
        self._first_lba, self._last_lba = first, last

    def create_disklabel(self, name: str) -> None:
        driver = self.get_label(name)
        if driver is None:
            raise Unresolvable(f"unsupported label type: {name!r}")

        self._label = driver
        self._partitions = {}
        self._npartitions = driver.max_partitions
        self._label_id = self._script_header("label-id") or driver.generate_label_id()
        self._update_usable_range()

        logger.info(
            "Created disk label",
            label=driver.name,
            device=self._dev_path,
            label_id=self._label_id,
            first_lba=self._first_lba,
            last_lba=self._last_lba,
        )

    def gpt_set_npartitions(self, entries: int) -> None:
        label = self._require_label()
        if label.kind != LabelKind.GPT:
            raise InvalidArgument(f"table-length is not supported by {label.name} labels")
        if entries <= 0:
            raise InvalidArgument(f"invalid number of partition entries: {entries}")
        if self._partitions and max(self._partitions) >= entries:
            raise InvalidArgument(f"partition {max(self._partitions) + 1} does not fit {entries} entries")

        self._npartitions = entries
        self._update_usable_range()
        for pa in self._partitions.values():
            if pa.start < self._first_lba or pa.end > self._last_lba:
                raise Unresolvable(f"partition {pa.partno + 1} outside of the new usable area")

    def get_disklabel_item(self, item: LabelItem) -> int | str:
        self._require_label()
        if item == LabelItem.FIRST_LBA:
            return self._first_lba
        if item == LabelItem.LAST_LBA:
            return self._last_lba
        if item == LabelItem.LABEL_ID:
            return self._label_id or ""
        raise InvalidArgument(f"unsupported label item: {item}")

    def get_disklabel_id(self) -> str | None:
        return self._label_id

    # ==================== Layout ====================

    def _align_up(self, lba: int) -> int:
        g = self.grain_sectors
        return -(-lba // g) * g

    def _align_down(self, lba: int) -> int:
        g = self.grain_sectors
        return lba // g * g

    def free_segments(self) -> list[tuple[int, int]]:
        """Unallocated (first, last) sector ranges inside the usable area."""
        segments: list[tuple[int, int]] = []
        cursor = self._first_lba
        for pa in sorted(self._partitions.values(), key=lambda p: p.start):
            if pa.start > cursor:
                segments.append((cursor, pa.start - 1))
            cursor = max(cursor, pa.end + 1)
        if cursor <= self._last_lba:
            segments.append((cursor, self._last_lba))
        return segments

    def _segment_containing(self, lba: int) -> tuple[int, int]:
        for first, last in self.free_segments():
            if first <= lba <= last:
                return first, last
        raise Unresolvable(f"sector {lba} is not in free space")

    def _default_start(self, needed: int) -> int:
        for first, last in self.free_segments():
            start = self._align_up(first)
            if start + needed - 1 <= last:
                return start
        raise Unresolvable("no free space left for a new partition")

    def _default_partno(self) -> int:
        for partno in range(self._npartitions):
            if partno not in self._partitions:
                return partno
        raise Unresolvable("no free partition slot")

    def add_partition(self, pa: Partition) -> Partition:
        """Lay out ``pa`` on the current label and return the stored record."""
        label = self._require_label()

        if pa.partno_follow_default or pa.partno is None:
            partno = self._default_partno()
        else:
            partno = pa.partno
            if not 0 <= partno < self._npartitions:
                raise InvalidArgument(f"partition number {partno + 1} out of range")
            if partno in self._partitions:
                raise InvalidArgument(f"partition {partno + 1} already defined")

        has_size = not pa.end_follow_default and pa.size is not None
        if has_size and pa.size <= 0:
            raise InvalidArgument(f"invalid partition size: {pa.size}")

        if pa.start_follow_default or pa.start is None:
            start = self._default_start(pa.size if has_size else 1)
        else:
            start = pa.start
        _, seg_last = self._segment_containing(start)

        if not has_size:
            end = seg_last
            aligned = self._align_down(end + 1) - 1
            if aligned > start:
                end = aligned
        else:
            end = start + pa.size - 1
            if not pa.size_explicit:
                aligned = self._align_up(end + 1) - 1
                if aligned > seg_last:
                    aligned = self._align_down(end + 1) - 1
                if aligned > start:
                    end = aligned
        if end > seg_last:
            raise Unresolvable(
                f"partition {partno + 1} ({start}-{end}) does not fit in free space ending at {seg_last}"
            )
        if label.kind == LabelKind.DOS and end >= DOS_MAX_SECTORS:
            raise Unresolvable(f"partition {partno + 1} exceeds the DOS 2^32 sector limit")

        ptype = pa.type or label.default_type
        if label.kind == LabelKind.DOS and ptype.code is None:
            raise Unresolvable(f"type {ptype} is not a DOS partition type")
        if label.kind == LabelKind.GPT and ptype.typestr is None:
            raise Unresolvable(f"type {ptype} is not a GPT partition type")

        part_uuid = pa.uuid
        if part_uuid is None and label.kind == LabelKind.GPT:
            part_uuid = str(uuid.uuid4()).upper()

        record = Partition(
            partno=partno,
            start=start,
            size=end - start + 1,
            boot=pa.boot,
            attrs=pa.attrs,
            uuid=part_uuid,
            name=pa.name,
            type=ptype,
        )
        self._partitions[partno] = record
        logger.debug("Added partition", partno=partno + 1, start=start, size=record.size)
        return replace(record)

    def delete_partition(self, partno: int) -> None:
        self._require_label()
        if self._partitions.pop(partno, None) is None:
            raise InvalidArgument(f"partition {partno + 1} does not exist")

    def apply_table(self, table: Table) -> None:
        for pa in table:
            self.add_partition(pa)

    def get_partitions(self) -> list[Partition]:
        return [replace(self._partitions[n]) for n in sorted(self._partitions)]
