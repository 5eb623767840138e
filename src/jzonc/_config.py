"""Immutable parse configuration."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

ObjectHook = Callable[[dict[str, Any]], Any] | None
ObjectPairsHook = Callable[[list[tuple[str, Any]]], Any] | None


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures JSONC parsing behavior with immutable settings.

    Centralized configuration for number conversion, resource limits and
    the hooks used when converting a value tree to native Python objects.
    """

    correctly_rounded: bool = False
    max_buffer_capacity: int | None = None
    object_hook: ObjectHook = None
    object_pairs_hook: ObjectPairsHook = None

    def __post_init__(self) -> None:
        if not isinstance(self.correctly_rounded, bool):
            raise TypeError("correctly_rounded must be a boolean")
        if self.max_buffer_capacity is not None:
            if isinstance(self.max_buffer_capacity, bool) or not isinstance(
                self.max_buffer_capacity, int
            ):
                raise TypeError("max_buffer_capacity must be an integer")
            if self.max_buffer_capacity <= 0:
                raise ValueError("max_buffer_capacity must be positive")
