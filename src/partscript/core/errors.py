"""
PartScript error hierarchy.

Every failure raised by the script engine derives from ScriptError so that
callers can catch the whole family at once. Allocation failures are left to
Python's own MemoryError.
"""

from __future__ import annotations


class ScriptError(Exception):
    """Base class for partition script failures."""

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        return self.message


class InvalidArgument(ScriptError, ValueError):
    """Malformed field syntax, bad sign or suffix, unterminated quote, etc."""


class UnsupportedHeader(ScriptError):
    """Header name outside the recognized set."""

    def __init__(self, name: str, line: int | None = None) -> None:
        super().__init__(f"unsupported header: {name!r}", line)
        self.name = name


class CorruptInput(ScriptError):
    """An input line ends without a terminator before end of file."""


class Unresolvable(ScriptError):
    """A type, label or size cannot be resolved against the bound context."""
