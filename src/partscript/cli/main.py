"""
PartScript CLI Main Entry Point.

Command-line interface for checking, converting and applying partition
table scripts.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import IO

import click
import humanize
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from partscript import __version__
from partscript.context import VirtualDisk, partname
from partscript.core.config import PartScriptConfig, load_config
from partscript.core.errors import ScriptError
from partscript.core.logging import setup_logging
from partscript.core.models import MoveHint, ResizeHint
from partscript.labels import TYPE_ALIASES, get_label_driver, list_label_drivers
from partscript.script import Script, apply_script, parse_size

console = Console()
err_console = Console(stderr=True)


def get_config(ctx: click.Context) -> PartScriptConfig:
    return ctx.obj["config"]


def read_script(
    ctx: click.Context,
    stream: IO[str],
    context: VirtualDisk | None = None,
) -> Script:
    """Read a script, reporting skipped headers unless --quiet."""
    config = get_config(ctx)
    script = Script(context=context, default_label=config.script.default_label)
    skipped = script.read_file(stream, strict=config.script.strict_headers)
    if skipped and not ctx.obj.get("quiet"):
        for exc in skipped:
            err_console.print(f"[yellow]Ignoring {escape(str(exc))}[/yellow]")
    return script


def fail(message: str) -> None:
    err_console.print(f"[red]Error: {escape(message)}[/red]")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="PartScript")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    json_output: bool,
    quiet: bool,
) -> None:
    """
    PartScript - partition table scripting tool.

    Reads sfdisk-style partition table dumps, writes them back as text or
    JSON, and applies them to virtual disks.
    """
    ctx.ensure_object(dict)

    if config:
        ctx.obj["config"] = PartScriptConfig.load(config)
    else:
        ctx.obj["config"] = load_config()

    setup_logging(ctx.obj["config"].logging)
    ctx.obj["json_output"] = json_output or ctx.obj["config"].script.json_output
    ctx.obj["quiet"] = quiet


@cli.command("dump")
@click.argument("script_file", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_context
def dump_script(ctx: click.Context, script_file: IO[str]) -> None:
    """Read SCRIPT_FILE (default stdin) and write it back normalized."""
    try:
        script = read_script(ctx, script_file)
    except ScriptError as e:
        fail(str(e))
        return

    script.enable_json(ctx.obj.get("json_output", False))
    script.write_file(sys.stdout)


@cli.command("check")
@click.argument("script_file", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_context
def check_script(ctx: click.Context, script_file: IO[str]) -> None:
    """Parse SCRIPT_FILE and show what it describes."""
    try:
        script = read_script(ctx, script_file)
    except ScriptError as e:
        fail(str(e))
        return

    if ctx.obj.get("json_output"):
        click.echo(json.dumps(script.to_dict(), indent=2, default=str))
        return

    header_table = Table(title="Headers")
    header_table.add_column("Name", style="cyan")
    header_table.add_column("Value", style="white")
    for header in script.headers:
        header_table.add_row(header.name, header.data)
    console.print(header_table)

    part_table = Table(title=f"Partitions ({script.nlines} lines read)")
    part_table.add_column("#", style="dim")
    part_table.add_column("Start", style="green")
    part_table.add_column("Size", style="green")
    part_table.add_column("Type", style="yellow")
    part_table.add_column("Name", style="white")
    part_table.add_column("Boot", style="red")

    for index, pa in enumerate(script.table, 1):
        if pa.has_start:
            start = str(pa.start)
        else:
            start = "default" + ("+" if pa.movestart is MoveHint.UP else "")
        if pa.has_size:
            size = str(pa.size) + ("" if pa.size_explicit else " (aligned)")
        else:
            size = "default" + ("+" if pa.resize is ResizeHint.ENLARGE else "")
        part_table.add_row(
            str(pa.partno + 1) if pa.has_partno else f"({index})",
            start,
            size,
            str(pa.type) if pa.type else "",
            pa.name or "",
            "*" if pa.boot else "",
        )
    console.print(part_table)

    if not ctx.obj.get("quiet"):
        console.print(f"[green]✓ Script is valid ({len(script.table)} partitions)[/green]")


@cli.command("apply")
@click.argument("script_file", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--size", "-s", help="Virtual disk size (e.g. 8GiB, 500M)")
@click.option("--sector-size", type=int, help="Logical sector size in bytes")
@click.option(
    "--image",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Size the virtual disk after this image file",
)
@click.option("--dump", "dump_result", is_flag=True, help="Print the resulting script")
@click.pass_context
def apply_command(
    ctx: click.Context,
    script_file: IO[str],
    size: str | None,
    sector_size: int | None,
    image: Path | None,
    dump_result: bool,
) -> None:
    """Apply SCRIPT_FILE to a virtual disk and show the resulting layout."""
    config = get_config(ctx)
    sector_size = sector_size or config.script.sector_size

    try:
        if image is not None:
            disk = VirtualDisk.from_image(image, sector_size=sector_size)
        elif size:
            size_bytes, _ = parse_size(size)
            disk = VirtualDisk(size_bytes, sector_size=sector_size, grain_size=config.script.grain_bytes)
        else:
            fail("either --size or --image is required")
            return

        script = read_script(ctx, script_file, context=disk)
        if not script.get_header("label"):
            script.set_header("label", config.script.default_label)

        apply_script(disk, script)
    except ScriptError as e:
        fail(str(e))
        return

    if dump_result or ctx.obj.get("json_output"):
        result = Script(context=disk)
        result.read_context()
        result.enable_json(ctx.obj.get("json_output", False))
        result.write_file(sys.stdout)
        return

    label = disk.label
    table = Table(title=f"{label.name if label else '?'} label on {disk.dev_path or 'virtual disk'}")
    table.add_column("Device", style="cyan")
    table.add_column("Start", style="green")
    table.add_column("End", style="green")
    table.add_column("Sectors", style="white")
    table.add_column("Size", style="green")
    table.add_column("Type", style="yellow")
    table.add_column("Boot", style="red")

    for pa in disk.get_partitions():
        device = partname(disk.dev_path, pa.partno + 1) if disk.dev_path else str(pa.partno + 1)
        table.add_row(
            device,
            str(pa.start),
            str(pa.end),
            str(pa.size),
            humanize.naturalsize(pa.size * disk.sector_size, binary=True),
            str(pa.type) if pa.type else "",
            "*" if pa.boot else "",
        )
    console.print(table)

    if not ctx.obj.get("quiet"):
        console.print(
            Panel(
                f"Disk: {humanize.naturalsize(disk.size_bytes, binary=True)}, "
                f"{disk.total_sectors} sectors of {disk.sector_size} bytes\n"
                f"Grain: {humanize.naturalsize(disk.grain_size, binary=True)}\n"
                f"Label id: {disk.get_disklabel_id()}",
                title="Applied",
            )
        )


@cli.command("labels")
@click.option("--types", "types_for", help="List the partition types of this label")
@click.pass_context
def list_labels(ctx: click.Context, types_for: str | None) -> None:
    """List supported label types, or the partition types of one label."""
    if types_for:
        driver = get_label_driver(types_for)
        if driver is None:
            fail(f"unknown label type: {types_for}")
            return
        table = Table(title=f"{driver.name} partition types")
        table.add_column("Type", style="cyan")
        table.add_column("Name", style="white")
        for ptype in driver.parttypes:
            table.add_row(ptype.as_string(), ptype.name)
        console.print(table)
        return

    table = Table(title="Type aliases")
    table.add_column("Alias", style="cyan")
    table.add_column("Shortcut", style="yellow")
    for driver in list_label_drivers():
        table.add_column(driver.name, style="white")

    for alias in TYPE_ALIASES:
        row = [alias.alias, (alias.shortcut or "") + (" (deprecated)" if alias.deprecated else "")]
        for driver in list_label_drivers():
            row.append(alias.data_for(driver.kind) or "-")
        table.add_row(*row)
    console.print(table)


def main() -> None:
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled[/yellow]")
        sys.exit(130)
    except Exception as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
