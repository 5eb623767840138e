"""Character to UTF-8 byte offset mapping for error positions."""

from __future__ import annotations

from typing import Final

# Lone surrogates produced by the surrogateescape decoder stand for one
# undecodable source byte each.
_ESCAPED_BYTE_LOW: Final = 0xDC80
_ESCAPED_BYTE_HIGH: Final = 0xDCFF


def utf8_width(char: str) -> int:
    """Returns the number of bytes ``char`` occupies in the source."""
    code_point = ord(char)
    if code_point < 0x80:
        return 1
    if code_point < 0x800:
        return 2
    if _ESCAPED_BYTE_LOW <= code_point <= _ESCAPED_BYTE_HIGH:
        return 1
    if code_point <= 0xFFFF:
        # Other lone surrogates are counted as their 3-byte encoding.
        return 3
    return 4


class UTF8PositionMapper:
    """Efficient UTF-8 position mapping with checkpoint system.

    Instead of encoding the whole document, this mapper records the byte
    offset of every ``checkpoint_interval``-th character and walks forward
    from the nearest checkpoint.
    """

    def __init__(self, text: str, checkpoint_interval: int = 256) -> None:
        """Initialize position mapper with checkpoint system.

        Args:
            text: The decoded document
            checkpoint_interval: Characters between checkpoints
        """
        if checkpoint_interval <= 0:
            raise ValueError("checkpoint_interval must be positive")

        self.text: Final = text
        self.checkpoint_interval: Final = checkpoint_interval
        self.checkpoints: list[int] = []  # index -> byte offset
        self._is_ascii_only: bool = text.isascii()

        if not self._is_ascii_only:
            self._build_checkpoints()

    def _build_checkpoints(self) -> None:
        """Build byte offsets at regular character intervals."""
        byte_pos = 0
        for char_pos, char in enumerate(self.text):
            if char_pos % self.checkpoint_interval == 0:
                self.checkpoints.append(byte_pos)
            byte_pos += utf8_width(char)

    def char_to_byte(self, char_pos: int) -> int:
        """Convert character position to byte position.

        Args:
            char_pos: Character position in the decoded document

        Returns:
            Byte position in the UTF-8 source
        """
        if self._is_ascii_only or not self.checkpoints:
            return char_pos

        char_pos = min(char_pos, len(self.text))
        index = min(
            char_pos // self.checkpoint_interval, len(self.checkpoints) - 1
        )
        byte_pos = self.checkpoints[index]
        for i in range(index * self.checkpoint_interval, char_pos):
            byte_pos += utf8_width(self.text[i])

        return byte_pos
