"""
Tests for partscript.labels package.
"""

import pytest

from partscript.core.models import LabelKind
from partscript.labels import (
    SCRIPT_PARSE_FLAGS,
    DosLabel,
    GptLabel,
    TypeParseFlags,
    get_label_driver,
    list_label_names,
)


class TestRegistry:
    """Tests for label driver lookup."""

    @pytest.mark.parametrize("name", ["dos", "DOS", "mbr", "msdos"])
    def test_dos_names(self, name: str) -> None:
        assert get_label_driver(name).kind == LabelKind.DOS

    def test_gpt(self) -> None:
        assert isinstance(get_label_driver("gpt"), GptLabel)

    def test_unknown(self) -> None:
        assert get_label_driver("zfs") is None
        assert get_label_driver(None) is None

    def test_names(self) -> None:
        assert list_label_names() == ["dos", "gpt"]


class TestDosTypes:
    """Tests for DOS type parsing."""

    def setup_method(self) -> None:
        self.label = DosLabel()

    @pytest.mark.parametrize(
        "token,code",
        [
            ("83", 0x83),
            ("0x83", 0x83),
            ("L", 0x83),
            ("linux", 0x83),
            ("S", 0x82),
            ("swap", 0x82),
            ("E", 0x05),
            ("U", 0xEF),
            ("Linux swap / Solaris", 0x82),
            ("X", 0x85),
        ],
    )
    def test_resolve(self, token: str, code: int) -> None:
        assert self.label.advparse_parttype(token).code == code

    def test_unknown_code(self) -> None:
        ptype = self.label.advparse_parttype("42")
        assert ptype.code == 0x42
        assert ptype.is_unknown

    def test_unknown_code_rejected(self) -> None:
        flags = SCRIPT_PARSE_FLAGS | TypeParseFlags.NOUNKNOWN
        assert self.label.advparse_parttype("42", flags) is None

    def test_deprecated_needs_flag(self) -> None:
        flags = SCRIPT_PARSE_FLAGS & ~TypeParseFlags.DEPRECATED
        assert self.label.advparse_parttype("X", flags) is None

    def test_data_first(self) -> None:
        # without DATALAST, "E" is read as hex 0x0E before the shortcut
        flags = TypeParseFlags.DATA | TypeParseFlags.SHORTCUT
        assert self.label.advparse_parttype("E", flags).code == 0x0E

    @pytest.mark.parametrize("token", ["", "zzz", "100", "0x"])
    def test_invalid(self, token: str) -> None:
        assert self.label.advparse_parttype(token) is None

    def test_label_id(self) -> None:
        label_id = self.label.generate_label_id()
        assert label_id.startswith("0x")
        assert len(label_id) == 10


class TestGptTypes:
    """Tests for GPT type parsing."""

    def setup_method(self) -> None:
        self.label = GptLabel()

    def test_guid_case_insensitive(self) -> None:
        ptype = self.label.advparse_parttype("c12a7328-f81f-11d2-ba4b-00a0c93ec93b")
        assert ptype.name == "EFI System"
        assert ptype.as_string() == "C12A7328-F81F-11D2-BA4B-00A0C93EC93B"

    def test_alias(self) -> None:
        assert self.label.advparse_parttype("home").name == "Linux home"

    def test_name(self) -> None:
        assert self.label.advparse_parttype("linux swap").name == "Linux swap"

    def test_no_gpt_extended(self) -> None:
        assert self.label.advparse_parttype("E") is None

    def test_unknown_guid(self) -> None:
        ptype = self.label.advparse_parttype("00000000-1111-2222-3333-444444444444")
        assert ptype.is_unknown

    def test_usable_range(self) -> None:
        assert self.label.first_usable_lba(512, 128) == 34
        assert self.label.last_usable_lba(2097152, 512, 128) == 2097118
        assert self.label.first_usable_lba(4096, 128) == 6
