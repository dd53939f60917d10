"""
PartScript script engine.

Reading, writing and applying partition table scripts.
"""

from partscript.script.apply import apply_script, apply_script_headers
from partscript.script.headers import Header, HeaderName
from partscript.script.parser import LineGrammar, classify_line, is_header_line
from partscript.script.script import Script
from partscript.script.tokenizer import Cursor, tokenize
from partscript.script.values import parse_size
from partscript.script.writers import build_json, write_json, write_text

__all__ = [
    "Cursor",
    "Header",
    "HeaderName",
    "LineGrammar",
    "Script",
    "apply_script",
    "apply_script_headers",
    "build_json",
    "classify_line",
    "is_header_line",
    "parse_size",
    "tokenize",
    "write_json",
    "write_text",
]
