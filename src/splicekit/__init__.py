"""Record positional edits against an input and apply them safely.

    from splicekit import Patcher

    patcher = Patcher()
    patcher.insert(1, "b")
    patcher.delete(2, 1)
    patcher.apply("acde")  # -> "abce"
"""

from splicekit.core.edit import Edit
from splicekit.core.errors import (
    ConflictError,
    ErrorKind,
    NegativeLengthError,
    NegativeOffsetError,
    OutOfRangeError,
    PatchError,
)
from splicekit.core.patcher import Patcher

__all__ = [
    "Patcher",
    "Edit",
    "ErrorKind",
    "PatchError",
    "NegativeOffsetError",
    "NegativeLengthError",
    "OutOfRangeError",
    "ConflictError",
]

__version__ = "0.1.0"
