"""Helpers for driving patchers from files."""

from splicekit.tools.script import (
    EditScript,
    EditStep,
    ScriptError,
    load_script,
    parse_script,
)

__all__ = [
    "EditScript",
    "EditStep",
    "ScriptError",
    "load_script",
    "parse_script",
]
