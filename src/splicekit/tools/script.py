"""Load edit scripts: declarative lists of edits to record."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from splicekit.core.log import logger
from splicekit.core.patcher import Patcher


class ScriptError(ValueError):
    """An edit script could not be read or is malformed."""


class EditStep(BaseModel):
    """One edit in a script.

    Offsets and lengths are byte positions in the original input, as
    with the Patcher methods this step replays onto.
    """

    op: Literal["delete", "insert", "rewrite"]
    offset: int
    length: int = 0
    data: str | bytes = ""

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def _check_fields(self) -> "EditStep":
        if self.op == "insert" and "length" in self.model_fields_set:
            raise ValueError("insert does not take a length")
        if self.op == "delete" and "data" in self.model_fields_set:
            raise ValueError("delete does not take data")
        return self

    def record(self, patcher: Patcher):
        if self.op == "delete":
            patcher.delete(self.offset, self.length)
        elif self.op == "insert":
            patcher.insert(self.offset, self.data)
        else:
            patcher.rewrite(self.offset, self.length, self.data)


class EditScript(BaseModel):
    """An ordered list of edits.

    Example YAML:
        edits:
          - {op: insert, offset: 3, data: " quick"}
          - {op: delete, offset: 20, length: 6}
          - {op: rewrite, offset: 40, length: 5, data: dog}
    """

    edits: list[EditStep] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def record(self, patcher: Patcher) -> int:
        """Replay every step onto patcher in script order.

        Returns:
            Number of steps replayed
        """
        for step in self.edits:
            step.record(patcher)
        return len(self.edits)


def parse_script(text: str, source: str = "<string>") -> EditScript:
    """Parse YAML or JSON edit script text.

    A bare list is accepted as shorthand for {edits: [...]}.

    Raises:
        ScriptError: If the text is not valid YAML or not a valid script
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ScriptError(f"{source}: invalid YAML: {e}") from e

    if data is None:
        data = {}
    elif isinstance(data, list):
        data = {"edits": data}

    try:
        script = EditScript.model_validate(data)
    except ValidationError as e:
        raise ScriptError(f"{source}: invalid edit script: {e}") from e

    logger.debug("Parsed edit script", source=source, steps=len(script.edits))
    return script


def load_script(path: Path) -> EditScript:
    """Read and parse an edit script file.

    Raises:
        OSError: If the file cannot be read
        ScriptError: If the file is not a valid script
    """
    path = Path(path)
    return parse_script(path.read_text(encoding="utf-8"), source=str(path))
