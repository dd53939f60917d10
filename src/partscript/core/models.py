"""
PartScript data models.

Defines the partition records and the table container the script engine
fills while reading and consumes while writing or applying.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Iterator


class LabelKind(Enum):
    """On-disk partition table family."""

    DOS = auto()
    GPT = auto()
    SUN = auto()
    SGI = auto()
    BSD = auto()


class MoveHint(Enum):
    """Direction in which a start offset is relative to its current position."""

    NONE = auto()
    UP = auto()
    DOWN = auto()


class ResizeHint(Enum):
    """Direction in which a size is relative to the current size."""

    NONE = auto()
    ENLARGE = auto()
    REDUCE = auto()


@dataclass(frozen=True)
class PartitionType:
    """A partition type as resolved by a label driver."""

    code: int | None = None  # DOS-style system id
    typestr: str | None = None  # GPT type GUID
    name: str = ""
    is_unknown: bool = False

    def as_string(self) -> str:
        """Token used for this type in script dumps."""
        if self.typestr:
            return self.typestr
        if self.code is not None:
            return f"{self.code:x}"
        return ""

    def __str__(self) -> str:
        return self.name or self.as_string()


@dataclass
class Partition:
    """A single partition entry of a script table."""

    partno: int | None = None
    start: int | None = None
    size: int | None = None
    partno_follow_default: bool = False
    start_follow_default: bool = False
    end_follow_default: bool = False
    size_explicit: bool = False  # size given as a bare sector count
    movestart: MoveHint = MoveHint.NONE
    resize: ResizeHint = ResizeHint.NONE
    boot: bool = False
    attrs: str | None = None
    uuid: str | None = None
    name: str | None = None
    type: PartitionType | None = None

    @classmethod
    def follow_defaults(cls) -> Partition:
        """New record with start, size and number all left to the label layer."""
        return cls(
            partno_follow_default=True,
            start_follow_default=True,
            end_follow_default=True,
        )

    @property
    def has_partno(self) -> bool:
        return self.partno is not None

    @property
    def has_start(self) -> bool:
        return self.start is not None

    @property
    def has_size(self) -> bool:
        return self.size is not None

    @property
    def end(self) -> int | None:
        if self.start is None or self.size is None or self.size == 0:
            return None
        return self.start + self.size - 1

    def set_partno(self, partno: int) -> None:
        self.partno = partno
        self.partno_follow_default = False

    def set_start(self, start: int) -> None:
        self.start = start
        self.start_follow_default = False

    def set_size(self, size: int) -> None:
        self.size = size
        self.end_follow_default = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "partno": self.partno,
            "start": self.start,
            "size": self.size,
            "partno_follow_default": self.partno_follow_default,
            "start_follow_default": self.start_follow_default,
            "end_follow_default": self.end_follow_default,
            "size_explicit": self.size_explicit,
            "movestart": self.movestart.name,
            "resize": self.resize.name,
            "boot": self.boot,
            "attrs": self.attrs,
            "uuid": self.uuid,
            "name": self.name,
            "type": self.type.as_string() if self.type else None,
        }


@dataclass
class Table:
    """
    Ordered collection of partitions.

    A table is shared by reference: a script hands out the same object to
    every caller, so changes made through any holder are seen by all.
    """

    partitions: list[Partition] = field(default_factory=list)

    def __iter__(self) -> Iterator[Partition]:
        return iter(self.partitions)

    def __len__(self) -> int:
        return len(self.partitions)

    def __getitem__(self, index: int) -> Partition:
        return self.partitions[index]

    @property
    def is_empty(self) -> bool:
        return not self.partitions

    def add_partition(self, partition: Partition) -> None:
        self.partitions.append(partition)

    def remove_partition(self, partition: Partition) -> None:
        self.partitions.remove(partition)

    def reset(self) -> None:
        """Drop all partitions but keep the table object alive."""
        self.partitions.clear()

    def get_partition_by_partno(self, partno: int) -> Partition | None:
        for p in self.partitions:
            if p.partno == partno:
                return p
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"partitions": [p.to_dict() for p in self.partitions]}
