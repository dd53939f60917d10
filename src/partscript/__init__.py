"""
PartScript - partition table scripting engine.

Reads, edits, dumps and applies sfdisk-style textual descriptions of a
disk's partition layout.
"""

__version__ = "1.0.0"
__author__ = "PartScript Team"

from partscript.core.config import PartScriptConfig
from partscript.script import Script, apply_script

__all__ = ["PartScriptConfig", "Script", "apply_script", "__version__"]
