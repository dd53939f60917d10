"""
PartScript Label Driver Base.

Defines the interface label drivers implement and the shared logic used to
turn a user-supplied type token into a PartitionType.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Flag, auto

from partscript.core.logging import get_logger
from partscript.core.models import LabelKind, PartitionType

logger = get_logger(__name__)


class TypeParseFlags(Flag):
    """Which spellings advparse_parttype() accepts, and in which order."""

    DATA = auto()  # hex code or GUID
    DATALAST = auto()  # try DATA after everything else
    SHORTCUT = auto()  # single letter, e.g. "L"
    ALIAS = auto()  # e.g. "linux", "swap"
    NAME = auto()  # full human name, e.g. "Linux swap"
    DEPRECATED = auto()  # accept obsolete shortcuts and aliases
    NOUNKNOWN = auto()  # reject well-formed data that names no known type


SCRIPT_PARSE_FLAGS = (
    TypeParseFlags.DATA
    | TypeParseFlags.DATALAST
    | TypeParseFlags.SHORTCUT
    | TypeParseFlags.ALIAS
    | TypeParseFlags.NAME
    | TypeParseFlags.DEPRECATED
)


@dataclass(frozen=True)
class TypeAlias:
    """A label independent name for a common partition type."""

    alias: str
    shortcut: str | None
    dos: str | None
    gpt: str | None
    deprecated: bool = False

    def data_for(self, kind: LabelKind) -> str | None:
        if kind == LabelKind.DOS:
            return self.dos
        if kind == LabelKind.GPT:
            return self.gpt
        return None


TYPE_ALIASES: tuple[TypeAlias, ...] = (
    TypeAlias("linux", "L", "83", "0FC63DAF-8483-4772-8E79-3D69D8477DE4"),
    TypeAlias("swap", "S", "82", "0657FD6D-A4AB-43C4-84E5-0933C84B4F4F"),
    TypeAlias("extended", "E", "05", None),
    TypeAlias("home", "H", "83", "933AC7E1-2EB4-4F13-B844-0E14E2AEF915"),
    TypeAlias("uefi", "U", "EF", "C12A7328-F81F-11D2-BA4B-00A0C93EC93B"),
    TypeAlias("raid", "R", "FD", "A19D880F-05FC-4D3B-A006-743F0F84911E"),
    TypeAlias("lvm", "V", "8E", "E6D6D379-F507-44C2-A23C-238F2A3DF928"),
    TypeAlias("xbootldr", None, "EA", "BC13C2FF-59E6-4262-A352-B275FD6F7172"),
    TypeAlias("Linux extended", "X", "85", None, deprecated=True),
)


class LabelDriver(ABC):
    """Abstract base class for on-disk partition table drivers."""

    #: Known types of this label, in display order.
    parttypes: tuple[PartitionType, ...] = ()

    @property
    @abstractmethod
    def name(self) -> str:
        """Label name as used in the ``label:`` header (e.g. 'gpt')."""

    @property
    @abstractmethod
    def kind(self) -> LabelKind:
        """Label family."""

    @property
    @abstractmethod
    def max_partitions(self) -> int:
        """Default number of partition entries."""

    @property
    @abstractmethod
    def default_type(self) -> PartitionType:
        """Type assigned to partitions created without an explicit type."""

    @abstractmethod
    def parse_type_data(self, data: str) -> PartitionType | None:
        """
        Parse label specific type data (hex code or GUID).

        Returns None when the string is not valid data for this label. Well
        formed data that names no known type yields an unknown PartitionType.
        """

    @abstractmethod
    def generate_label_id(self) -> str:
        """New random disk identifier in this label's notation."""

    def first_usable_lba(self, sector_size: int, npartitions: int) -> int:
        return 1

    def last_usable_lba(self, total_sectors: int, sector_size: int, npartitions: int) -> int:
        return total_sectors - 1

    def get_parttype_from_name(self, name: str) -> PartitionType | None:
        lowered = name.lower()
        for t in self.parttypes:
            if t.name.lower() == lowered:
                return t
        return None

    def _from_alias(self, token: str, deprecated: bool) -> PartitionType | None:
        lowered = token.lower()
        for entry in TYPE_ALIASES:
            if entry.alias.lower() != lowered:
                continue
            if entry.deprecated and not deprecated:
                return None
            data = entry.data_for(self.kind)
            return self.parse_type_data(data) if data else None
        return None

    def _from_shortcut(self, token: str, deprecated: bool) -> PartitionType | None:
        for entry in TYPE_ALIASES:
            if entry.shortcut is None or entry.shortcut != token:
                continue
            if entry.deprecated and not deprecated:
                return None
            data = entry.data_for(self.kind)
            return self.parse_type_data(data) if data else None
        return None

    def advparse_parttype(
        self, token: str, flags: TypeParseFlags = SCRIPT_PARSE_FLAGS
    ) -> PartitionType | None:
        """Resolve a type token; returns None when nothing matches."""
        if not token:
            return None

        res: PartitionType | None = None
        deprecated = bool(flags & TypeParseFlags.DEPRECATED)

        if flags & TypeParseFlags.DATA and not flags & TypeParseFlags.DATALAST:
            res = self.parse_type_data(token)
        if res is None and flags & TypeParseFlags.ALIAS:
            res = self._from_alias(token, deprecated)
        if res is None and flags & TypeParseFlags.SHORTCUT:
            res = self._from_shortcut(token, deprecated)
        if res is None and flags & TypeParseFlags.NAME:
            res = self.get_parttype_from_name(token)
        if res is None and flags & TypeParseFlags.DATA and flags & TypeParseFlags.DATALAST:
            res = self.parse_type_data(token)

        if res is not None and res.is_unknown and flags & TypeParseFlags.NOUNKNOWN:
            res = None

        logger.debug(
            "Parsed partition type",
            label=self.name,
            token=token,
            resolved=res.as_string() if res else None,
        )
        return res

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
