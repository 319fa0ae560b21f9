"""Record positional edits and apply them to an input buffer.

Offsets and lengths always refer to the original, unmodified input, so
callers never adjust positions for edits recorded earlier. Nothing is
validated while recording; every check happens when the edits are
applied to a concrete input, which lets one Patcher be reused across
inputs of different lengths.

Example:
    patcher = Patcher()
    patcher.insert(3, " quick")
    patcher.delete(20, 6)
    patcher.rewrite(40, 5, "dog")
    output = patcher.apply("The brown fox jumps twice over the lazy horse")
"""

from __future__ import annotations

from operator import attrgetter

from splicekit.core.edit import Edit
from splicekit.core.errors import (
    ConflictError,
    NegativeLengthError,
    NegativeOffsetError,
    OutOfRangeError,
    PatchError,
)
from splicekit.core.log import logger

Buffer = bytes | bytearray | memoryview


class Patcher:
    """Accumulates edits and applies them with conflict detection.

    Replacement data is stored by reference unless copy_data is set.
    A mutable buffer (bytearray, memoryview) handed to insert() or
    rewrite() must not be changed before the next apply, or the
    change shows up in the output.

    Text is converted with the patcher's encoding. Offsets are byte
    offsets into the encoded text, not character indices.
    """

    def __init__(self, encoding: str = "utf-8", copy_data: bool = False):
        """Create an empty patcher.

        Args:
            encoding: Codec used to convert str data and input to bytes
            copy_data: Copy replacement buffers when recording instead
                of holding a reference
        """
        self.encoding = encoding
        self.copy_data = copy_data
        self._edits: list[Edit] = []

    def __len__(self) -> int:
        return len(self._edits)

    def __repr__(self) -> str:
        return f"Patcher(edits={len(self._edits)})"

    def is_empty(self) -> bool:
        """Return True if no edits are recorded.

        Zero-length operations never create an edit.
        """
        return not self._edits

    def reset(self):
        """Discard all recorded edits."""
        self._edits = []

    # ============================================================
    # RECORDING
    # ============================================================

    def delete(self, offset: int, length: int):
        """Remove length bytes at offset."""
        if length != 0:
            self._edits.append(Edit(offset, length))

    def insert(self, offset: int, data: Buffer | str):
        """Insert data at offset.

        Multiple inserts at the same offset are emitted one after the
        other in the order they were recorded.
        """
        self.rewrite(offset, 0, data)

    def rewrite(self, offset: int, length: int, data: Buffer | str):
        """Replace length bytes at offset with data."""
        data = self._to_bytes(data)
        if length != 0 or len(data) != 0:
            self._edits.append(Edit(offset, length, data))

    def _to_bytes(self, data: Buffer | str) -> Buffer:
        if isinstance(data, str):
            return data.encode(self.encoding, errors="surrogateescape")
        if self.copy_data:
            return bytes(data)
        return data

    # ============================================================
    # APPLYING
    # ============================================================

    def apply(self, original: Buffer | str) -> bytes | str:
        """Apply the recorded edits, returning the same type as given.

        Args:
            original: Input text or bytes; never modified

        Returns:
            Patched text for str input, otherwise patched bytes

        Raises:
            PatchError: If an edit is out of range of original or
                overlaps another edit
        """
        if isinstance(original, str):
            return self.patch_string(original)
        return self.patch_bytes(original)

    def patch_string(self, original: str) -> str:
        """Apply the recorded edits to text.

        The result is decoded with surrogateescape, so edits that split
        a multi-byte character still produce a str.
        """
        encoded = original.encode(self.encoding, errors="surrogateescape")
        output = self.patch_bytes(encoded)
        return output.decode(self.encoding, errors="surrogateescape")

    def patch_bytes(self, original: Buffer) -> bytes:
        """Apply the recorded edits to a byte buffer.

        The edits remain recorded and can be applied to other inputs.
        Error text names the offending edits as
        (<offset>,<length>,<data>), e.g. (10,5,) for delete(10, 5)
        and (5,0,foo) for insert(5, "foo").

        Args:
            original: Input bytes; never modified

        Returns:
            New bytes with every edit applied

        Raises:
            PatchError: If an edit is out of range of original or
                overlaps another edit
        """
        logger.debug(
            "Applying edits",
            edits=len(self._edits),
            input_length=len(original),
        )

        try:
            edits = self._ordered(len(original))
        except PatchError as e:
            logger.debug(
                "Edits rejected",
                kind=e.kind.value,
                edits=[edit.render(self.encoding) for edit in e.edits],
            )
            raise

        output = bytearray()
        cursor = 0
        for edit in edits:
            output += original[cursor:edit.offset]
            output += edit.data
            cursor = edit.end
        output += original[cursor:]

        logger.spew("Edits applied", output_length=len(output))
        return bytes(output)

    def _ordered(self, size: int) -> list[Edit]:
        """Sort edits by offset and check them against an input size.

        The sort is stable, so inserts at the same offset keep their
        recording order. The first failure in sorted order is raised.
        """
        edits = sorted(self._edits, key=attrgetter("offset"))

        for i, edit in enumerate(edits):
            if edit.offset < 0:
                raise NegativeOffsetError(edit, encoding=self.encoding)
            if edit.length < 0:
                raise NegativeLengthError(edit, encoding=self.encoding)
            if edit.end > size:
                raise OutOfRangeError(edit, encoding=self.encoding)

            if i + 1 < len(edits):
                following = edits[i + 1]
                if edit.end > following.offset:
                    raise ConflictError(
                        edit, following, encoding=self.encoding
                    )

        return edits
