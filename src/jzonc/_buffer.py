"""Amortized-growth buffer shared by the tokenizer and parser."""

from collections.abc import Iterator
from typing import Generic
from typing import TypeVar

from jzonc._errors import AllocationError

T = TypeVar("T")


class GrowableBuffer(Generic[T]):
    """
    Dynamic array with capacity doubling and an optional hard limit.

    Used to accumulate tokens, string bytes and in-progress array/object
    elements before they are frozen into tuples. The buffer never releases
    the payloads it holds; callers free those before calling destroy().
    """

    __slots__ = ("_items", "_length", "max_capacity")

    def __init__(self, capacity: int = 16, max_capacity: int | None = None):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.max_capacity = max_capacity
        self._items: list[T | None] = [None] * self._bounded(capacity)
        self._length = 0

    def _bounded(self, capacity: int) -> int:
        if self.max_capacity is None:
            return capacity
        return min(capacity, self.max_capacity)

    @property
    def capacity(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[T]:
        for index in range(self._length):
            yield self.get(index)

    def push(self, item: T) -> None:
        """Appends one element, growing the backing store when full."""
        if self._length == len(self._items):
            self._grow()
        self._items[self._length] = item
        self._length += 1

    def _grow(self) -> None:
        new_capacity = max(len(self._items) * 2, 1)
        if self.max_capacity is not None:
            if len(self._items) >= self.max_capacity:
                raise AllocationError(
                    f"buffer capacity limit of {self.max_capacity} reached"
                )
            new_capacity = min(new_capacity, self.max_capacity)
        # Build the new store before swapping so a MemoryError leaves the
        # buffer untouched.
        grown = self._items + [None] * (new_capacity - len(self._items))
        self._items = grown

    def get(self, index: int) -> T:
        """Returns the element stored at ``index``."""
        if not 0 <= index < self._length:
            raise IndexError("buffer index out of range")
        return self._items[index]  # type: ignore[return-value]

    def freeze(self) -> tuple[T, ...]:
        """Copies the stored elements into a fixed-size tuple."""
        return tuple(self._items[: self._length])  # type: ignore[arg-type]

    def destroy(self) -> None:
        """Releases the backing store; element payloads are not touched."""
        self._items = []
        self._length = 0
