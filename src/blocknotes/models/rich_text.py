"""Opaque rich-text value handed over by the editing surface."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RichText:
    """A span of formatted text.

    ``data`` is the editing surface's serialized formatting and is never
    inspected here. ``plain`` is its plain-text projection.
    """

    plain: str = ""
    data: bytes = b""

    def plain_text(self) -> str:
        return self.plain

    def __len__(self) -> int:
        return len(self.plain)

    @property
    def byte_length(self) -> int:
        """Size of the formatting payload in bytes."""
        return len(self.data)

    def is_blank(self) -> bool:
        """True when the plain text is empty or whitespace only."""
        return not self.plain.strip()

    @classmethod
    def of(cls, text: str) -> "RichText":
        """Wrap plain text with no formatting payload."""
        return cls(plain=text)
