"""
PartScript Script.

A Script is an in-memory partition table description: ordered headers plus
a table of partitions. It can be built in four ways:

* read from a text dump (``Script.from_file()``, ``read_file()``);
* read line by line from an interactive source (``read_line()`` with
  ``set_line_source()``);
* copied from a device context (``read_context()``);
* assembled in code (``set_header()``, ``table``, ``set_table()``).

The table is shared by reference: ``script.table`` always returns the same
object, so partitions added through it are seen by the script and the
other way around.
"""

from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Callable, Iterator

from partscript.context.base import DEFAULT_GRAIN, DeviceContext, LabelItem
from partscript.core.errors import CorruptInput, InvalidArgument, ScriptError, UnsupportedHeader
from partscript.core.logging import OperationLogger, get_logger
from partscript.core.models import LabelKind, Table
from partscript.labels import LabelDriver, get_label_driver
from partscript.labels.gpt import GPT_NPARTITIONS_DEFAULT
from partscript.script.headers import Header, HeaderName, HeaderStore
from partscript.script.parser import LineGrammar, parse_buffer
from partscript.script.writers import write_json, write_text

logger = get_logger(__name__)

LineSource = Callable[["Script", IO[str]], "str | None"]

#: Longest line the default reader accepts without a trailing newline.
MAX_LINE_LENGTH = 8192


class Script:
    """Partition table script."""

    def __init__(
        self,
        context: DeviceContext | None = None,
        default_label: str = "dos",
    ) -> None:
        self.context = context
        self.default_label = default_label
        self.nlines = 0
        self.json = False
        self.force_label = False
        self.userdata: Any = None
        self.max_line_length = MAX_LINE_LENGTH
        self.skipped_headers: list[UnsupportedHeader] = []

        self._headers = HeaderStore()
        self._table: Table | None = None
        self._line_source: LineSource | None = None
        self._label_cache: tuple[LabelDriver | None, int] | None = None

    def __repr__(self) -> str:
        nparts = len(self._table) if self._table is not None else 0
        return f"<Script headers={len(self._headers)} partitions={nparts}>"

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        context: DeviceContext | None = None,
        default_label: str = "dos",
    ) -> Script:
        """Create a script from the dump at ``path``."""
        script = cls(context=context, default_label=default_label)
        with open(path, encoding="utf-8") as f:
            script.read_file(f)
        return script

    # ==================== Headers ====================

    @property
    def headers(self) -> Iterator[Header]:
        return iter(self._headers)

    def get_header(self, name: str) -> str | None:
        return self._headers.get(name)

    def set_header(self, name: str, data: str | None) -> None:
        """
        Add, replace or remove a header.

        Any header name is accepted here; only parsing restricts names to the
        recognized set. ``None`` or an empty string removes the header.
        """
        if not name:
            raise InvalidArgument("header name must not be empty")
        self._headers.set(name, data)

    @property
    def has_force_label(self) -> bool:
        """True once a ``label:`` header has been parsed."""
        return self.force_label

    # ==================== Table ====================

    @property
    def table(self) -> Table:
        """The script's table; created empty on first access."""
        if self._table is None:
            self._table = Table()
        return self._table

    def set_table(self, table: Table | None) -> None:
        """Replace the script's table (``None`` drops it)."""
        self._table = table

    @property
    def has_partitions(self) -> bool:
        return self._table is not None and not self._table.is_empty

    # ==================== Label and geometry ====================

    def get_label(self) -> LabelDriver | None:
        """
        Driver for the ``label`` header.

        Falls back to the bound context's current label and then to
        ``default_label``. The result is cached until the headers change.
        """
        generation = self._headers.generation
        if self._label_cache is not None and self._label_cache[1] == generation:
            return self._label_cache[0]

        name = self.get_header(HeaderName.LABEL.value)
        if self.context is not None:
            driver = self.context.get_label(name)
        else:
            driver = get_label_driver(name)
        if driver is None and name is None:
            driver = get_label_driver(self.default_label)

        self._label_cache = (driver, generation)
        return driver

    @property
    def sector_size(self) -> int | None:
        """Sector size of the bound context, else the ``sector-size`` header."""
        if self.context is not None and self.context.sector_size:
            return self.context.sector_size
        value = self.get_header(HeaderName.SECTOR_SIZE.value)
        if value and value.isdigit():
            return int(value)
        return None

    # ==================== Reading ====================

    def reset(self) -> None:
        """Drop all headers and partitions; the table object is kept."""
        if self._table is not None:
            self._table.reset()
        self._headers.clear()
        self.force_label = False
        self.nlines = 0
        self.skipped_headers = []

    def set_line_source(self, source: LineSource | None) -> None:
        """
        Override how lines are read.

        ``source(script, stream)`` returns the next line including its
        newline, or None at end of input.
        """
        self._line_source = source

    def _next_raw_line(self, stream: IO[str]) -> str | None:
        if self._line_source is not None:
            return self._line_source(self, stream)
        line = stream.readline(self.max_line_length + 1)
        return line or None

    def read_buffer(self, text: str) -> LineGrammar | None:
        """Parse one logical line; errors propagate unchanged."""
        return parse_buffer(self, text)

    def read_line(self, stream: IO[str]) -> bool:
        """
        Read and parse the next non-blank, non-comment line.

        Returns True at end of input. Errors carry the current line number;
        UnsupportedHeader is usually safe to ignore.
        """
        while True:
            raw = self._next_raw_line(stream)
            if raw is None:
                return True
            self.nlines += 1

            if raw.endswith("\n"):
                raw = raw[:-1]
            elif len(raw) > self.max_line_length:
                raise CorruptInput("line too long or missing newline", line=self.nlines)

            if raw.endswith("\r"):
                raw = raw[:-1]
            stripped = raw.lstrip(" \t")
            if stripped and not stripped.startswith("#"):
                break

        try:
            self.read_buffer(stripped)
        except ScriptError as exc:
            if exc.line is None:
                exc.line = self.nlines
            raise
        return False

    def read_file(self, stream: IO[str], strict: bool = False) -> list[UnsupportedHeader]:
        """
        Read a whole dump, replacing the current content.

        Unsupported headers are skipped (unless ``strict``) and returned;
        any other error stops reading.
        """
        self.reset()
        with OperationLogger("script read", logger):
            while True:
                try:
                    if self.read_line(stream):
                        break
                except UnsupportedHeader as exc:
                    if strict:
                        raise
                    logger.warning("Ignoring unsupported header", header=exc.name, line=exc.line)
                    self.skipped_headers.append(exc)
        return list(self.skipped_headers)

    def read_context(self, context: DeviceContext | None = None) -> None:
        """Replace the script content with the label and partitions of ``context``."""
        cxt = context or self.context
        if cxt is None:
            raise InvalidArgument("no device context")

        self.reset()
        label = cxt.get_label(None)
        if label is None:
            raise InvalidArgument("device has no partition table")

        table = self.table
        for partition in cxt.get_partitions():
            table.add_partition(partition)

        self.set_header(HeaderName.LABEL.value, label.name)
        label_id = cxt.get_disklabel_id()
        if label_id:
            self.set_header(HeaderName.LABEL_ID.value, label_id)
        if cxt.dev_path:
            self.set_header(HeaderName.DEVICE.value, cxt.dev_path)
        self.set_header(HeaderName.UNIT.value, "sectors")

        if label.kind == LabelKind.GPT:
            self.set_header(
                HeaderName.FIRST_LBA.value, str(cxt.get_disklabel_item(LabelItem.FIRST_LBA))
            )
            self.set_header(
                HeaderName.LAST_LBA.value, str(cxt.get_disklabel_item(LabelItem.LAST_LBA))
            )
            if cxt.npartitions != GPT_NPARTITIONS_DEFAULT:
                self.set_header(HeaderName.TABLE_LENGTH.value, str(cxt.npartitions))

        if cxt.grain_size != DEFAULT_GRAIN:
            self.set_header(HeaderName.GRAIN.value, str(cxt.grain_size))
        self.set_header(HeaderName.SECTOR_SIZE.value, str(cxt.sector_size))

        logger.debug("Script read from context", device=cxt.dev_path, partitions=len(table))

    # ==================== Writing ====================

    def enable_json(self, enabled: bool = True) -> None:
        self.json = enabled

    def write_file(self, out: IO[str]) -> None:
        """Write the script in the selected format (text dump or JSON)."""
        with OperationLogger("script write", logger, json=self.json):
            if self.json:
                write_json(self, out)
            else:
                write_text(self, out)

    def to_dict(self) -> dict[str, Any]:
        return {
            "headers": self._headers.to_dict(),
            "partitions": [p.to_dict() for p in self._table] if self._table else [],
            "nlines": self.nlines,
        }
