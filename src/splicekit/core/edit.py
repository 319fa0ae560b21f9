"""Edit record value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Edit:
    """A single recorded change against the original input.

    Attributes:
        offset: Byte position in the original input
        length: Number of original bytes consumed (0 for insertions)
        data: Replacement bytes (empty for deletions)
    """

    offset: int
    length: int = 0
    data: bytes = b""

    @property
    def end(self) -> int:
        """Byte position just past the consumed span."""
        return self.offset + self.length

    def render(self, encoding: str = "utf-8") -> str:
        """Render as (<offset>,<length>,<data>) with data decoded as text.

        Bytes that do not decode are shown as backslash escapes.
        """
        text = bytes(self.data).decode(encoding, errors="backslashreplace")
        return f"({self.offset},{self.length},{text})"

    def __str__(self) -> str:
        return self.render()
