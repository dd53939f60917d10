"""
Script headers.

Headers are the ``name: value`` lines at the top of a script. Names are
compared case-insensitively and each name appears at most once; the store
keeps insertion order for dumping.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator


class HeaderName(Enum):
    """Header names accepted when parsing a script."""

    LABEL = "label"
    UNIT = "unit"
    LABEL_ID = "label-id"
    DEVICE = "device"
    GRAIN = "grain"
    FIRST_LBA = "first-lba"
    LAST_LBA = "last-lba"
    TABLE_LENGTH = "table-length"
    SECTOR_SIZE = "sector-size"

    @classmethod
    def lookup(cls, name: str) -> HeaderName | None:
        lowered = name.strip().lower()
        for member in cls:
            if member.value == lowered:
                return member
        return None


@dataclass
class Header:
    name: str
    data: str


class HeaderStore:
    """Ordered, case-insensitive collection of script headers."""

    def __init__(self) -> None:
        self._headers: dict[str, Header] = {}
        self.generation = 0

    def __iter__(self) -> Iterator[Header]:
        return iter(list(self._headers.values()))

    def __len__(self) -> int:
        return len(self._headers)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._headers

    def get(self, name: str) -> str | None:
        header = self._headers.get(name.lower())
        return header.data if header else None

    def set(self, name: str, data: str | None) -> None:
        """Add or replace a header; empty ``data`` removes it."""
        key = name.lower()
        if not data:
            if self._headers.pop(key, None) is not None:
                self.generation += 1
            return

        existing = self._headers.get(key)
        if existing is not None:
            existing.data = data
        else:
            self._headers[key] = Header(name=name, data=data)
        self.generation += 1

    def clear(self) -> None:
        if self._headers:
            self._headers.clear()
            self.generation += 1

    def to_dict(self) -> dict[str, str]:
        return {h.name: h.data for h in self._headers.values()}
