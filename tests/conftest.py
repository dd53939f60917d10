"""
Pytest configuration and fixtures for PartScript tests.
"""

import io
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


GPT_SCRIPT = """\
label: gpt
label-id: 5A9C9E8B-6C5D-4E0B-9F2A-1B2C3D4E5F60
device: /dev/sda
unit: sectors
first-lba: 2048
last-lba: 2097118
sector-size: 512

/dev/sda1 : start=        2048, size=      204800, type=C12A7328-F81F-11D2-BA4B-00A0C93EC93B, uuid=11111111-2222-3333-4444-555555555555, name="EFI System"
/dev/sda2 : start=      206848, size=     1048576, type=0FC63DAF-8483-4772-8E79-3D69D8477DE4, uuid=66666666-7777-8888-9999-AAAAAAAAAAAA, name="root", attrs="LegacyBIOSBootable"
"""

DOS_SCRIPT = """\
label: dos
label-id: 0x1234abcd
device: /dev/sdb
unit: sectors

/dev/sdb1 : start=        2048, size=      204800, type=83, bootable
/dev/sdb2 : start=      206848, size=      409600, type=82
"""


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def gpt_script_text() -> str:
    return GPT_SCRIPT


@pytest.fixture
def dos_script_text() -> str:
    return DOS_SCRIPT


@pytest.fixture
def virtual_disk() -> "VirtualDisk":
    """A 1 GiB in-memory disk with 512-byte sectors."""
    from partscript.context import VirtualDisk

    return VirtualDisk(1024 * 1024 * 1024, dev_path="/dev/vda")


@pytest.fixture
def read_script():
    """Parse script text into a new Script."""
    from partscript.script import Script

    def _read(text: str, **kwargs) -> "Script":
        script = Script(**kwargs)
        script.read_file(io.StringIO(text))
        return script

    return _read


@pytest.fixture
def sample_config(temp_dir: Path) -> "PartScriptConfig":
    """Create a sample configuration for testing."""
    from partscript.core.config import LoggingConfig, PartScriptConfig

    config = PartScriptConfig(
        logging=LoggingConfig(log_directory=temp_dir / "logs", level="ERROR"),
    )
    config.ensure_directories()
    return config


@pytest.fixture
def config_file(sample_config: "PartScriptConfig", temp_dir: Path) -> Path:
    path = temp_dir / "config.json"
    sample_config.save(path)
    return path


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow running tests")
