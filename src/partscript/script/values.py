"""
Script value parsers.

Stateless helpers that turn single script tokens into typed values: sizes
with unit suffixes, sign markers, default-value sentinels, escaped names
and partition numbers taken from device names.
"""

from __future__ import annotations

import re

from partscript.core.errors import InvalidArgument
from partscript.script.tokenizer import BLANKS, TERMINATORS, Cursor

SIZE_SUFFIXES = "KMGTPEZY"

_SIZE_RE = re.compile(
    r"^(?P<num>0[xX][0-9a-fA-F]+|\d+)(?:\.(?P<frac>\d+))?(?P<suffix>[A-Za-z]*)$"
)
_HEX_ESCAPE_RE = re.compile(r"\\x([0-9a-fA-F]{2})")
_MANGLE_CHARS = '"\\`$'


def parse_size(text: str) -> tuple[int, int]:
    """
    Parse ``<number>[.<fraction>][<suffix>]``.

    Suffixes are K, M, G, T, P, E, Z, Y (either case) optionally followed by
    ``iB`` (powers of 1024) or ``B`` (powers of 1000); a bare letter means
    powers of 1024. Returns ``(value, power)`` where ``power`` is zero when
    no suffix was given.

    >>> parse_size("1MiB")
    (1048576, 2)
    >>> parse_size("2048")
    (2048, 0)
    """
    if text is None:
        raise InvalidArgument("missing size")
    stripped = text.strip()
    if not stripped:
        raise InvalidArgument("empty size")
    if stripped.startswith("-"):
        raise InvalidArgument(f"negative size: {text!r}")

    match = _SIZE_RE.match(stripped)
    if not match:
        raise InvalidArgument(f"invalid size: {text!r}")

    num_str = match.group("num")
    num = int(num_str, 16) if num_str[:2].lower() == "0x" else int(num_str)
    frac = match.group("frac")
    suffix = match.group("suffix")

    if not suffix:
        if frac:
            raise InvalidArgument(f"fractional size without unit: {text!r}")
        return num, 0

    power = SIZE_SUFFIXES.find(suffix[0].upper()) + 1
    if power == 0:
        raise InvalidArgument(f"unknown size suffix: {text!r}")

    rest = suffix[1:]
    if rest in ("iB", "ib"):
        base = 1024
    elif rest in ("B", "b"):
        base = 1000
    elif rest == "":
        base = 1024
    else:
        raise InvalidArgument(f"unknown size suffix: {text!r}")

    multiplier = base**power
    value = num * multiplier
    if frac:
        value += int(frac) * multiplier // 10 ** len(frac)
    return value, power


def split_sign(token: str) -> tuple[str, str]:
    """Split a leading ``+``/``-`` off a token; the sign is '' when absent."""
    stripped = token.lstrip(BLANKS)
    if stripped[:1] in ("+", "-"):
        return stripped[0], stripped[1:]
    return "", stripped


def is_default_value(cursor: Cursor) -> bool:
    """
    Check for the "use default" sentinel at the cursor.

    Recognized spellings are ``-`` followed by a terminator or blank, a bare
    terminator, and the end of the line. On a match the cursor is moved past
    the sentinel; otherwise it is left untouched.
    """
    text = cursor.text
    n = len(text)
    p = cursor.pos
    while p < n and text[p] in BLANKS:
        p += 1

    blank = False
    if p < n and text[p] == "-":
        x = p + 1
        p = x
        while p < n and text[p] in BLANKS:
            p += 1
        blank = x < p

    if p < n and text[p] in TERMINATORS:
        cursor.pos = p + 1
        return True
    if p >= n or blank:
        cursor.pos = p
        return True
    return False


def partno_from_devname(text: str) -> int | None:
    """
    Zero-based partition number from a device name or plain index.

    ``/dev/sda3`` and ``3`` both give 2. Returns None when the name does not
    end in digits.
    """
    if not text:
        return None
    stripped = text.rstrip()
    match = re.search(r"(\d+)$", stripped)
    if not match:
        return None
    return int(match.group(1)) - 1


def unhexmangle(text: str) -> str:
    """Decode ``\\xNN`` escapes (UTF-8 bytes) in a string."""
    if "\\x" not in text:
        return text
    out = bytearray()
    pos = 0
    for match in _HEX_ESCAPE_RE.finditer(text):
        out += text[pos : match.start()].encode("utf-8")
        out.append(int(match.group(1), 16))
        pos = match.end()
    out += text[pos:].encode("utf-8")
    return out.decode("utf-8", errors="replace")


def hexmangle_quoted(text: str) -> str:
    """Double-quote a string, hex-escaping quotes, shell metacharacters and non-printables."""
    parts = ['"']
    for ch in text:
        if ch in _MANGLE_CHARS or not (ch.isascii() and ch.isprintable()):
            parts.extend(f"\\x{b:02x}" for b in ch.encode("utf-8"))
        else:
            parts.append(ch)
    parts.append('"')
    return "".join(parts)
