"""
PartScript Core.

Configuration, logging, errors and the partition data model shared by
the script engine and device contexts.
"""

from partscript.core.config import PartScriptConfig
from partscript.core.errors import (
    CorruptInput,
    InvalidArgument,
    ScriptError,
    UnsupportedHeader,
    Unresolvable,
)
from partscript.core.logging import get_logger, setup_logging
from partscript.core.models import MoveHint, Partition, PartitionType, ResizeHint, Table

__all__ = [
    "CorruptInput",
    "InvalidArgument",
    "MoveHint",
    "PartScriptConfig",
    "Partition",
    "PartitionType",
    "ResizeHint",
    "ScriptError",
    "Table",
    "UnsupportedHeader",
    "Unresolvable",
    "get_logger",
    "setup_logging",
]
