"""
Script serializers.

Two renderings of the same headers and table: the text dump that
``Script.read_file()`` reads back, and a write-only JSON document.
"""

from __future__ import annotations

import json
from typing import IO, TYPE_CHECKING, Any

from partscript.context.base import partname
from partscript.core.models import LabelKind, Partition
from partscript.script.values import hexmangle_quoted

if TYPE_CHECKING:
    from partscript.script.script import Script

# header name -> (JSON key, written as a number)
JSON_HEADER_KEYS: dict[str, tuple[str, bool]] = {
    "first-lba": ("firstlba", True),
    "last-lba": ("lastlba", True),
    "sector-size": ("sectorsize", True),
    "label-id": ("id", False),
}


def _suppress_attrs(script: Script) -> bool:
    # DOS attrs duplicate the boot flag; only a label the script names or the
    # device carries counts, not the parsing default
    context = script.context
    if script.get_header("label") is None and (context is None or context.label is None):
        return False
    label = script.get_label()
    return label is not None and label.kind == LabelKind.DOS


def _partition_prefix(devname: str | None, pa: Partition) -> str:
    # 0 reads back as "number follows default"
    number = pa.partno + 1 if pa.partno is not None else 0
    return partname(devname, number) if devname else str(number)


def format_partition_line(script: Script, pa: Partition, devname: str | None) -> str:
    fields: list[str] = []
    if pa.has_start:
        fields.append(f"start={pa.start:12d}")
    if pa.has_size:
        fields.append(f"size={pa.size:12d}")
    if pa.type is not None:
        fields.append(f"type={pa.type.as_string()}")
    if pa.uuid:
        fields.append(f"uuid={pa.uuid}")
    if pa.name:
        fields.append(f"name={hexmangle_quoted(pa.name)}")
    if pa.attrs and not _suppress_attrs(script):
        fields.append(f'attrs="{pa.attrs}"')
    if pa.boot:
        fields.append("bootable")
    return f"{_partition_prefix(devname, pa)} : " + ", ".join(fields)


def write_text(script: Script, out: IO[str]) -> None:
    """Write the ``name: value`` headers, a blank line, then one line per partition."""
    devname: str | None = None
    for header in script.headers:
        out.write(f"{header.name}: {header.data}\n")
        if header.name.lower() == "device":
            devname = header.data

    if not script.has_partitions:
        return

    out.write("\n")
    for pa in script.table:
        out.write(format_partition_line(script, pa, devname) + "\n")


def _json_number(data: str) -> int | str:
    try:
        return int(data)
    except ValueError:
        return data


def build_json(script: Script) -> dict[str, Any]:
    """The ``{"partitiontable": {...}}`` document as plain Python objects."""
    table: dict[str, Any] = {}
    devname: str | None = None

    for header in script.headers:
        key, numeric = JSON_HEADER_KEYS.get(header.name.lower(), (header.name, False))
        table[key] = _json_number(header.data) if numeric else header.data
        if header.name.lower() == "device":
            devname = header.data

    if script.has_partitions:
        suppress_attrs = _suppress_attrs(script)
        partitions: list[dict[str, Any]] = []
        for pa in script.table:
            entry: dict[str, Any] = {}
            if devname:
                entry["node"] = _partition_prefix(devname, pa)
            if pa.has_start:
                entry["start"] = pa.start
            if pa.has_size:
                entry["size"] = pa.size
            if pa.type is not None:
                entry["type"] = pa.type.as_string()
            if pa.uuid:
                entry["uuid"] = pa.uuid
            if pa.name:
                entry["name"] = pa.name
            if pa.attrs and not suppress_attrs:
                entry["attrs"] = pa.attrs
            if pa.boot:
                entry["bootable"] = True
            partitions.append(entry)
        table["partitions"] = partitions

    return {"partitiontable": table}


def write_json(script: Script, out: IO[str]) -> None:
    """Write the script as JSON."""
    json.dump(build_json(script), out, indent=3, ensure_ascii=False)
    out.write("\n")
