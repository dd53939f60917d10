"""
Script apply engine.

Turns a parsed script into a new label and partitions on a device
context. Nothing is written to a device here; contexts decide when their
in-memory label reaches the disk.
"""

from __future__ import annotations

from partscript.context.base import DeviceContext
from partscript.core.errors import InvalidArgument, Unresolvable
from partscript.core.logging import OperationLogger, get_logger
from partscript.script.headers import HeaderName
from partscript.script.script import Script
from partscript.script.values import parse_size

logger = get_logger(__name__)


def _header_number(script: Script, name: HeaderName) -> int | None:
    value = script.get_header(name.value)
    if value is None:
        return None
    try:
        number, _ = parse_size(value)
    except InvalidArgument as exc:
        raise Unresolvable(f"invalid {name.value} header: {value!r}") from exc
    return number


def apply_script_headers(context: DeviceContext, script: Script) -> None:
    """
    Bind ``script`` to ``context`` and create a new empty label.

    The ``grain`` header becomes the user allocation granularity, pending
    user device properties are applied, then a label of the ``label``
    header's type is created and, if given, the GPT entry count set from
    ``table-length``.
    """
    context.script = script

    grain = _header_number(script, HeaderName.GRAIN)
    if grain is not None:
        context.save_user_grain(grain)

    if context.has_user_device_properties():
        context.apply_user_device_properties()

    name = script.get_header(HeaderName.LABEL.value)
    if not name:
        raise InvalidArgument("script has no label header")
    context.create_disklabel(name)

    entries = _header_number(script, HeaderName.TABLE_LENGTH)
    if entries is not None:
        context.gpt_set_npartitions(entries)

    logger.debug(
        "Script headers applied",
        label=name,
        grain=context.grain_size,
        sector_size=context.sector_size,
    )


def apply_script(context: DeviceContext, script: Script) -> None:
    """
    Create a new label and all partitions of ``script`` on ``context``.

    The script previously bound to the context is restored afterwards,
    whether or not applying succeeded.
    """
    old = context.script
    try:
        with OperationLogger(
            "script apply",
            logger,
            device=context.dev_path,
            partitions=len(script.table) if script.has_partitions else 0,
        ):
            apply_script_headers(context, script)
            if script.has_partitions:
                context.apply_table(script.table)
    finally:
        context.script = old
