"""
Error types for the two failure channels of a parse.

Syntax problems surface as JSONDecodeError with position information;
resource exhaustion surfaces as AllocationError.
"""

from functools import cached_property
from typing import TypeAlias

from jzonc._utf8_mapper import UTF8PositionMapper

Position: TypeAlias = int


class JSONDecodeError(ValueError):
    """
    Handles JSONC parsing failures with precise position information.

    Error state containing position and line/column numbers to help users
    identify and fix syntax issues. The byte offset of the error in the
    UTF-8 encoding of the document is computed on first access.
    """

    def __init__(self, msg: str, doc: str = "", pos: Position = 0) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos

        # Compute line and column numbers from position
        self.lineno = doc.count("\n", 0, pos) + 1 if doc else 1
        self.colno = pos - doc.rfind("\n", 0, pos) if doc else pos + 1

        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")

    def __reduce__(self) -> tuple[type, tuple[str, str, int]]:
        return self.__class__, (self.msg, self.doc, self.pos)

    @cached_property
    def byte_pos(self) -> Position:
        """Offset of the error in the UTF-8 encoding of the document."""
        if not self.doc:
            return self.pos
        return UTF8PositionMapper(self.doc).char_to_byte(self.pos)


class AllocationError(MemoryError):
    """
    Raised when a parse exhausts a resource limit.

    Covers buffer growth beyond the configured capacity and nesting deeper
    than the interpreter can recurse. Partial structures are released
    before this propagates.
    """
