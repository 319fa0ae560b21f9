"""Apply command - patches a file with an edit script."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from splicekit.core.errors import PatchError
from splicekit.core.log import logger
from splicekit.tools.script import ScriptError, load_script

if TYPE_CHECKING:
    from splicekit.core.config import State


class ApplyCommand(BaseModel):
    """Apply an edit script to an input file.

    Every offset in the script refers to the unmodified input. The
    edits are checked for range errors and overlaps before anything
    is written.
    """

    input: Path = Field(description="File to patch (read, never modified)")
    script: Path = Field(
        description="YAML or JSON edit script (list of edits)"
    )
    output: Path | None = Field(
        default=None,
        description="Where to write the result (default: stdout)",
    )

    def run(self, state: State) -> int:
        """Run the apply command.

        Args:
            state: State instance

        Returns:
            Exit code (0=success, 1=failure)
        """
        status = state.runtime.apply
        status.status = "running"

        with logger.span(
            "Applying edit script",
            input=str(self.input),
            script=str(self.script),
        ):
            try:
                patcher = state.config.new_patcher()
                status.edits_recorded = load_script(self.script).record(
                    patcher
                )
                original = self.input.read_bytes()
                status.input_size = len(original)
                output = patcher.patch_bytes(original)

                if self.output is None:
                    sys.stdout.buffer.write(output)
                    sys.stdout.buffer.flush()
                else:
                    self.output.write_bytes(output)
            except (PatchError, ScriptError, OSError) as e:
                status.status = "failed"
                status.error = str(e)
                logger.error("Apply failed", error=str(e))
                return 1

        status.output_size = len(output)
        status.status = "complete"
        logger.info(
            "Apply complete",
            edits=status.edits_recorded,
            input_size=status.input_size,
            output_size=status.output_size,
        )
        return 0
