"""CLI command modules for splicekit."""

from splicekit.command.apply import ApplyCommand

__all__ = ["ApplyCommand"]
