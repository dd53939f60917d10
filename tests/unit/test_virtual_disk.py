"""
Tests for partscript.context module.
"""

from pathlib import Path

import pytest

from partscript.context import DEFAULT_GRAIN, LabelItem, VirtualDisk, partname
from partscript.core.errors import InvalidArgument, Unresolvable
from partscript.core.models import Partition


class TestPartname:
    """Tests for partition device naming."""

    @pytest.mark.parametrize(
        "device,partno,expected",
        [
            ("/dev/sda", 1, "/dev/sda1"),
            ("/dev/nvme0n1", 2, "/dev/nvme0n1p2"),
            ("/dev/loop0", 1, "/dev/loop0p1"),
            ("/dev/mapper/vg-disk", 3, "/dev/mapper/vg-disk-part3"),
        ],
    )
    def test_partname(self, device: str, partno: int, expected: str) -> None:
        assert partname(device, partno) == expected


class TestVirtualDisk:
    """Tests for VirtualDisk."""

    def test_geometry(self, virtual_disk: VirtualDisk) -> None:
        assert virtual_disk.sector_size == 512
        assert virtual_disk.total_sectors == 2097152
        assert virtual_disk.grain_size == DEFAULT_GRAIN
        assert virtual_disk.grain_sectors == 2048
        assert not virtual_disk.is_labeled()

    @pytest.mark.parametrize("size,sector_size", [(0, 512), (1024, 1000), (1024, 256)])
    def test_invalid_geometry(self, size: int, sector_size: int) -> None:
        with pytest.raises(InvalidArgument):
            VirtualDisk(size, sector_size=sector_size)

    def test_from_image(self, temp_dir: Path) -> None:
        image = temp_dir / "disk.img"
        image.write_bytes(b"\0" * (4 * 1024 * 1024))

        disk = VirtualDisk.from_image(image)
        assert disk.total_sectors == 8192
        assert disk.dev_path == str(image)

    def test_user_properties(self, virtual_disk: VirtualDisk) -> None:
        assert not virtual_disk.has_user_device_properties()
        virtual_disk.set_user_sector_size(4096)
        virtual_disk.save_user_grain(8192)
        assert virtual_disk.has_user_device_properties()

        virtual_disk.apply_user_device_properties()
        assert virtual_disk.sector_size == 4096
        assert virtual_disk.grain_size == 8192

    def test_invalid_grain(self, virtual_disk: VirtualDisk) -> None:
        with pytest.raises(Unresolvable):
            virtual_disk.save_user_grain(1000)

    def test_create_disklabel(self, virtual_disk: VirtualDisk) -> None:
        virtual_disk.create_disklabel("gpt")
        assert virtual_disk.is_labeled()
        assert virtual_disk.npartitions == 128
        assert virtual_disk.get_disklabel_item(LabelItem.FIRST_LBA) == 34
        assert virtual_disk.get_disklabel_item(LabelItem.LAST_LBA) == 2097118
        assert virtual_disk.get_disklabel_item(LabelItem.LABEL_ID) == virtual_disk.get_disklabel_id()

    def test_no_label(self, virtual_disk: VirtualDisk) -> None:
        with pytest.raises(InvalidArgument):
            virtual_disk.add_partition(Partition.follow_defaults())

    def test_free_segments(self, virtual_disk: VirtualDisk) -> None:
        virtual_disk.create_disklabel("dos")
        pa = Partition.follow_defaults()
        pa.set_start(4096)
        pa.set_size(2048)
        pa.size_explicit = True
        virtual_disk.add_partition(pa)

        assert virtual_disk.free_segments() == [(1, 4095), (6144, 2097151)]

    def test_start_in_use(self, virtual_disk: VirtualDisk) -> None:
        virtual_disk.create_disklabel("dos")
        virtual_disk.add_partition(Partition.follow_defaults())

        pa = Partition.follow_defaults()
        pa.set_start(4096)
        with pytest.raises(Unresolvable):
            virtual_disk.add_partition(pa)

    def test_delete_partition(self, virtual_disk: VirtualDisk) -> None:
        virtual_disk.create_disklabel("dos")
        virtual_disk.add_partition(Partition.follow_defaults())
        virtual_disk.delete_partition(0)
        assert virtual_disk.get_partitions() == []

        with pytest.raises(InvalidArgument):
            virtual_disk.delete_partition(0)

    def test_returned_partitions_are_copies(self, virtual_disk: VirtualDisk) -> None:
        virtual_disk.create_disklabel("dos")
        virtual_disk.add_partition(Partition.follow_defaults())
        virtual_disk.get_partitions()[0].start = 1
        assert virtual_disk.get_partitions()[0].start == 2048

    def test_dos_slots_exhausted(self, virtual_disk: VirtualDisk) -> None:
        virtual_disk.create_disklabel("dos")
        for _ in range(4):
            pa = Partition.follow_defaults()
            pa.set_size(2048)
            virtual_disk.add_partition(pa)

        with pytest.raises(Unresolvable):
            virtual_disk.add_partition(Partition.follow_defaults())
