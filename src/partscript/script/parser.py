"""
Script line parsers.

Each logical script line is one of three grammars:

* header lines, ``<name>: <value>``, accepted only before the first
  partition;
* key=value partition lines, ``[<device>] : start=<n>, size=<n>, ...``;
* positional partition lines, ``<start>, <size>, <type>, <bootable>``.

A partition record is added to the script table only once its whole line
has been parsed.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

from partscript.core.errors import InvalidArgument, UnsupportedHeader, Unresolvable
from partscript.core.logging import get_logger
from partscript.core.models import MoveHint, Partition, PartitionType, ResizeHint
from partscript.labels import SCRIPT_PARSE_FLAGS
from partscript.script.headers import HeaderName
from partscript.script.tokenizer import BLANKS, TERMINATORS, Cursor
from partscript.script.values import (
    is_default_value,
    parse_size,
    partno_from_devname,
    split_sign,
    unhexmangle,
)

if TYPE_CHECKING:
    from partscript.script.script import Script

logger = get_logger(__name__)


class LineGrammar(Enum):
    """Grammar a script line is parsed with."""

    HEADER = auto()
    KEY_VALUE = auto()
    POSITIONAL = auto()


def is_header_line(line: str) -> bool:
    """``name: value`` with something on both sides of the colon and no ``=``."""
    colon = line.find(":")
    if colon <= 0 or colon + 1 >= len(line):
        return False
    return "=" not in line


def classify_line(line: str, table_empty: bool) -> LineGrammar:
    if table_empty and is_header_line(line):
        return LineGrammar.HEADER
    if "=" in line:
        return LineGrammar.KEY_VALUE
    return LineGrammar.POSITIONAL


def parse_line_header(script: Script, line: str) -> None:
    """Parse ``<name>: <value>`` into the script's headers."""
    if not line or ":" not in line:
        raise InvalidArgument(f"not a header line: {line!r}")

    name, _, value = line.partition(":")
    name = name.strip()
    value = value.strip()
    if not name or not value:
        raise InvalidArgument(f"incomplete header line: {line!r}")

    header = HeaderName.lookup(name)
    if header is None:
        raise UnsupportedHeader(name)

    if header is HeaderName.LABEL:
        context = script.context
        if context is not None and context.get_label(value) is None:
            raise Unresolvable(f"unknown label type: {value!r}")
        script.force_label = True
    elif header is HeaderName.UNIT:
        if value != "sectors":
            raise InvalidArgument(f"unsupported unit: {value!r} (only 'sectors')")

    script.set_header(header.value, value)


def _to_sectors(script: Script, num: int, power: int, field: str) -> int:
    if not power:
        return num
    sector_size = script.sector_size
    if not sector_size:
        raise Unresolvable(f"{field}: sector size unknown, cannot convert {num} bytes")
    return num // sector_size


def parse_start_value(script: Script, pa: Partition, cursor: Cursor) -> None:
    if is_default_value(cursor):
        pa.start_follow_default = True
        return

    token = cursor.next_token()
    if token is None:
        raise InvalidArgument(f"invalid start: {cursor.rest!r}")

    if token == "+":
        pa.start_follow_default = True
        pa.movestart = MoveHint.UP
        return

    sign, magnitude = split_sign(token)
    num, power = parse_size(magnitude)
    pa.set_start(_to_sectors(script, num, power, "start"))
    pa.movestart = {"-": MoveHint.DOWN, "+": MoveHint.UP}.get(sign, MoveHint.NONE)


def parse_size_value(script: Script, pa: Partition, cursor: Cursor) -> None:
    if is_default_value(cursor):
        pa.end_follow_default = True
        return

    token = cursor.next_token()
    if token is None:
        raise InvalidArgument(f"invalid size: {cursor.rest!r}")

    if token == "+":
        pa.end_follow_default = True
        pa.resize = ResizeHint.ENLARGE
        return

    sign, magnitude = split_sign(token)
    num, power = parse_size(magnitude)
    if not power:
        pa.size_explicit = True
    pa.set_size(_to_sectors(script, num, power, "size"))
    pa.resize = {"-": ResizeHint.REDUCE, "+": ResizeHint.ENLARGE}.get(sign, ResizeHint.NONE)


def next_string(cursor: Cursor, field: str) -> str:
    token = cursor.next_token()
    if token is None:
        raise InvalidArgument(f"invalid {field} value: {cursor.rest!r}")
    return token


def resolve_type(script: Script, token: str) -> PartitionType:
    label = script.get_label()
    if label is None:
        raise Unresolvable(f"cannot resolve type {token!r}: no label driver")
    ptype = label.advparse_parttype(token, SCRIPT_PARSE_FLAGS)
    if ptype is None:
        raise Unresolvable(f"unknown {label.name} partition type: {token!r}")
    return ptype


def parse_line_nameval(script: Script, line: str) -> Partition:
    """Parse a ``[<device>] : key=value, ...`` line and append the partition."""
    pa = Partition.follow_defaults()

    colon = line.find(":")
    equal = line.find("=")
    if colon != -1 and (equal == -1 or colon < equal):
        partno = partno_from_devname(line[:colon])
        if partno is not None and partno >= 0:
            pa.set_partno(partno)
        cursor = Cursor(line, colon + 1)
    else:
        cursor = Cursor(line)

    while not cursor.at_end:
        cursor.skip_blank()
        if cursor.at_end:
            break

        if cursor.consume_ci("start="):
            parse_start_value(script, pa, cursor)
        elif cursor.consume_ci("size="):
            parse_size_value(script, pa, cursor)
        elif cursor.startswith_ci("bootable"):
            token = cursor.next_token()
            if token is None or token.lower() != "bootable":
                raise InvalidArgument(f"invalid bootable flag: {token!r}")
            pa.boot = True
        elif cursor.consume_ci("attrs="):
            pa.attrs = next_string(cursor, "attrs")
        elif cursor.consume_ci("uuid="):
            pa.uuid = next_string(cursor, "uuid")
        elif cursor.consume_ci("name="):
            pa.name = unhexmangle(next_string(cursor, "name"))
        elif cursor.consume_ci("type=") or cursor.consume_ci("Id="):
            pa.type = resolve_type(script, next_string(cursor, "type"))
        else:
            raise InvalidArgument(f"unknown field: {cursor.rest!r}")

    script.table.add_partition(pa)
    return pa


def parse_line_valcommas(script: Script, line: str) -> Partition:
    """Parse a ``<start>, <size>, <type>, <bootable>`` line and append the partition."""
    pa = Partition.follow_defaults()
    cursor = Cursor(line)
    item = -1

    while not cursor.at_end:
        cursor.skip_blank()
        if cursor.at_end:
            break
        item += 1
        begin = cursor.pos

        if item == 0:
            parse_start_value(script, pa, cursor)
        elif item == 1:
            parse_size_value(script, pa, cursor)
        elif item == 2:
            pa.type = None
            if cursor.peek() not in TERMINATORS and not is_default_value(cursor):
                pa.type = resolve_type(script, next_string(cursor, "type"))
        elif item == 3:
            if cursor.peek() not in TERMINATORS:
                token = cursor.next_token()
                if token in ("*", "+"):
                    pa.boot = True
                elif token == "-":
                    pa.boot = False
                else:
                    raise InvalidArgument(f"invalid bootable flag: {token!r}")

        # a field that consumed nothing (e.g. a bare ',') is stepped over
        if cursor.pos == begin:
            logger.debug("Skipping unparsed character", line=line, offset=begin)
            cursor.advance(1)

    script.table.add_partition(pa)
    return pa


def parse_buffer(script: Script, text: str) -> LineGrammar | None:
    """Parse one logical line into ``script``; returns the grammar used."""
    line = text.lstrip(BLANKS)
    if not line:
        return None

    grammar = classify_line(line, script.table.is_empty)
    if grammar is LineGrammar.HEADER:
        parse_line_header(script, line)
    elif grammar is LineGrammar.KEY_VALUE:
        parse_line_nameval(script, line)
    else:
        parse_line_valcommas(script, line)
    return grammar
