"""
Integration tests for the partscript command line.
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from partscript.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def dos_file(temp_dir: Path, dos_script_text: str) -> Path:
    path = temp_dir / "dos.sfdisk"
    path.write_text(dos_script_text, encoding="utf-8")
    return path


@pytest.mark.integration
class TestDumpCommand:
    """Tests for `partscript dump`."""

    def test_text(self, runner: CliRunner, config_file: Path, dos_file: Path, dos_script_text: str) -> None:
        result = runner.invoke(cli, ["--config", str(config_file), "dump", str(dos_file)])
        assert result.exit_code == 0
        assert dos_script_text in result.output

    def test_json(self, runner: CliRunner, config_file: Path, dos_file: Path) -> None:
        result = runner.invoke(cli, ["--config", str(config_file), "--json", "dump", str(dos_file)])
        assert result.exit_code == 0
        assert '"partitiontable"' in result.output
        assert '"id": "0x1234abcd"' in result.output

    def test_stdin(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["--config", str(config_file), "dump"], input="label: gpt\n")
        assert result.exit_code == 0
        assert "label: gpt" in result.output

    def test_parse_error(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["--config", str(config_file), "dump"], input="label: dos\nfoo=1\n")
        assert result.exit_code == 1
        assert "line 2" in result.output


@pytest.mark.integration
class TestCheckCommand:
    """Tests for `partscript check`."""

    def test_valid(self, runner: CliRunner, config_file: Path, dos_file: Path) -> None:
        result = runner.invoke(cli, ["--config", str(config_file), "check", str(dos_file)])
        assert result.exit_code == 0
        assert "Script is valid (2 partitions)" in result.output

    def test_unsupported_header_reported(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["--config", str(config_file), "check"], input="weird: x\nlabel: dos\n")
        assert result.exit_code == 0
        assert "weird" in result.output


@pytest.mark.integration
class TestApplyCommand:
    """Tests for `partscript apply`."""

    def test_apply_and_dump(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(
            cli,
            ["--config", str(config_file), "apply", "--size", "1GiB", "--dump"],
            input=",100MiB,L,*\n,,S\n",
        )
        assert result.exit_code == 0
        assert "label: dos" in result.output
        assert "1 : start=        2048, size=      204800, type=83, bootable" in result.output

    def test_apply_table(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(
            cli,
            ["--config", str(config_file), "apply", "--size", "1GiB"],
            input="label: gpt\n\nsize=100MiB\n",
        )
        assert result.exit_code == 0
        assert "Applied" in result.output

    def test_requires_size(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["--config", str(config_file), "apply"], input="label: dos\n")
        assert result.exit_code == 1

    def test_too_small(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(
            cli,
            ["--config", str(config_file), "apply", "--size", "1MiB"],
            input="label: dos\n\nsize=10MiB\n",
        )
        assert result.exit_code == 1


@pytest.mark.integration
class TestLabelsCommand:
    """Tests for `partscript labels`."""

    def test_aliases(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["--config", str(config_file), "labels"])
        assert result.exit_code == 0
        assert "swap" in result.output

    def test_types(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["--config", str(config_file), "labels", "--types", "gpt"])
        assert result.exit_code == 0
        assert "EFI System" in result.output

    def test_unknown_label(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["--config", str(config_file), "labels", "--types", "zfs"])
        assert result.exit_code == 1
