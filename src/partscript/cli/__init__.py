"""
PartScript CLI - Command-line interface.
"""

from partscript.cli.main import cli, main

__all__ = ["cli", "main"]
