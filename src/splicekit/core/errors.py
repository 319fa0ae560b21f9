"""Errors raised when recorded edits cannot be applied."""

from __future__ import annotations

from enum import Enum

from splicekit.core.edit import Edit


class ErrorKind(str, Enum):
    """Failure kinds; values are the phrases used in error text."""

    NEGATIVE_OFFSET = "negative offset"
    NEGATIVE_LENGTH = "negative length"
    OUT_OF_RANGE = "out of range"
    CONFLICT = "conflict"


class PatchError(ValueError):
    """Recorded edits are invalid for the given input.

    Attributes:
        kind: Which validation failed
        edits: The offending edit records (two for a conflict)

    Edit data in the message is decoded with the given encoding,
    normally the encoding of the Patcher that recorded it.
    """

    kind: ErrorKind

    def __init__(self, *edits: Edit, encoding: str = "utf-8"):
        self.edits = edits
        rendered = " vs ".join(edit.render(encoding) for edit in edits)
        super().__init__(f"{self.kind.value}: {rendered}")


class NegativeOffsetError(PatchError):
    """An edit starts before the beginning of the input."""

    kind = ErrorKind.NEGATIVE_OFFSET


class NegativeLengthError(PatchError):
    """An edit consumes a negative number of bytes."""

    kind = ErrorKind.NEGATIVE_LENGTH


class OutOfRangeError(PatchError):
    """An edit extends past the end of the input."""

    kind = ErrorKind.OUT_OF_RANGE


class ConflictError(PatchError):
    """Two edits consume overlapping spans of the input."""

    kind = ErrorKind.CONFLICT


__all__ = [
    "ErrorKind",
    "PatchError",
    "NegativeOffsetError",
    "NegativeLengthError",
    "OutOfRangeError",
    "ConflictError",
]
