"""
Tests for partscript.core.models module.
"""

from partscript.core.models import MoveHint, Partition, PartitionType, ResizeHint, Table


class TestPartitionType:
    """Tests for PartitionType."""

    def test_dos_string(self) -> None:
        assert PartitionType(code=0x83, name="Linux").as_string() == "83"

    def test_gpt_string(self) -> None:
        ptype = PartitionType(typestr="0FC63DAF-8483-4772-8E79-3D69D8477DE4", name="Linux filesystem")
        assert ptype.as_string() == "0FC63DAF-8483-4772-8E79-3D69D8477DE4"
        assert str(ptype) == "Linux filesystem"

    def test_str_without_name(self) -> None:
        assert str(PartitionType(code=0x0C)) == "c"


class TestPartition:
    """Tests for Partition."""

    def test_default_values(self) -> None:
        pa = Partition()
        assert not pa.has_partno
        assert not pa.has_start
        assert not pa.has_size
        assert pa.movestart is MoveHint.NONE
        assert pa.resize is ResizeHint.NONE
        assert pa.boot is False

    def test_follow_defaults(self) -> None:
        pa = Partition.follow_defaults()
        assert pa.partno_follow_default
        assert pa.start_follow_default
        assert pa.end_follow_default
        assert not pa.size_explicit

    def test_setters_clear_follow_flags(self) -> None:
        pa = Partition.follow_defaults()
        pa.set_partno(2)
        pa.set_start(2048)
        pa.set_size(100)
        assert (pa.partno, pa.start, pa.size) == (2, 2048, 100)
        assert not pa.partno_follow_default
        assert not pa.start_follow_default
        assert not pa.end_follow_default

    def test_end(self) -> None:
        assert Partition(start=2048, size=2048).end == 4095
        assert Partition(start=2048).end is None
        assert Partition(start=2048, size=0).end is None

    def test_to_dict(self) -> None:
        data = Partition(start=1, type=PartitionType(code=0x82)).to_dict()
        assert data["start"] == 1
        assert data["type"] == "82"
        assert data["movestart"] == "NONE"


class TestTable:
    """Tests for Table."""

    def test_add_and_lookup(self) -> None:
        table = Table()
        assert table.is_empty
        first = Partition(partno=0)
        second = Partition(partno=3)
        table.add_partition(first)
        table.add_partition(second)

        assert len(table) == 2
        assert table[1] is second
        assert table.get_partition_by_partno(3) is second
        assert table.get_partition_by_partno(1) is None

    def test_remove_and_reset(self) -> None:
        pa = Partition()
        table = Table([pa, Partition()])
        table.remove_partition(pa)
        assert len(table) == 1
        table.reset()
        assert table.is_empty

    def test_to_dict(self) -> None:
        assert Table([Partition(start=5)]).to_dict()["partitions"][0]["start"] == 5
