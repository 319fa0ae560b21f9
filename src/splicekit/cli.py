#!/usr/bin/env python3
"""splicekit CLI - apply offset-based edit scripts to files."""

import sys
from contextlib import suppress

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from splicekit.command.apply import ApplyCommand
from splicekit.core.config import State


class CliState(State):
    """Apply edit scripts whose offsets refer to the original input.

    Edits are recorded from a YAML/JSON script, checked for range
    errors and overlaps, then applied in one pass.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.patcher.encoding latin-1)
    2. Environment variables
       (SPLICEKIT_CONFIG__PATCHER__ENCODING=latin-1)
    3. .env file
    4. --include files, ./splicekit.yaml, user splicekit.yaml,
       package defaults
    """

    apply: CliSubCommand[ApplyCommand]

    def cli_cmd(self):
        """Dispatch to the active subcommand, or show help."""
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            # argparse exits 0 after printing help
            with suppress(SystemExit):
                CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        # Closes log sinks on the way out
        with self:
            exit_code = subcommand.run(self)
        raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
