"""
Value tree produced by a successful parse.

Every container exclusively owns its children. ``free`` is the one routine
that tears a tree down; the parser reuses it on every cleanup path.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any
from typing import ClassVar

from jzonc._config import ObjectHook
from jzonc._config import ObjectPairsHook


class ValueKind(Enum):
    """Discriminates the active variant of a Value."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


@dataclass(slots=True)
class Null:
    kind: ClassVar[ValueKind] = ValueKind.NULL


@dataclass(slots=True)
class Boolean:
    value: bool
    kind: ClassVar[ValueKind] = ValueKind.BOOLEAN


@dataclass(slots=True)
class Number:
    value: float
    kind: ClassVar[ValueKind] = ValueKind.NUMBER


@dataclass(slots=True)
class String:
    value: str
    kind: ClassVar[ValueKind] = ValueKind.STRING


@dataclass(slots=True)
class Array:
    """Ordered, fixed-length sequence of values."""

    items: tuple["Value", ...] = ()
    kind: ClassVar[ValueKind] = ValueKind.ARRAY

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["Value"]:
        return iter(self.items)

    def __getitem__(self, index: int) -> "Value":
        return self.items[index]


@dataclass(frozen=True, slots=True)
class Member:
    key: str
    value: "Value"


@dataclass(slots=True)
class Object:
    """
    Ordered sequence of key/value members.

    Members keep parse order and duplicate keys are all retained; nothing
    is merged.
    """

    members: tuple[Member, ...] = ()
    kind: ClassVar[ValueKind] = ValueKind.OBJECT

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[Member]:
        return iter(self.members)

    def keys(self) -> list[str]:
        return [member.key for member in self.members]


Value = Null | Boolean | Number | String | Array | Object


def free(value: Value) -> None:
    """
    Releases a value tree.

    Array elements and object members are released before the storage of
    their container. Walks the tree with an explicit stack so arbitrarily
    deep trees are handled. Null, Boolean and Number own nothing.
    """
    pending: list[Value] = [value]
    while pending:
        current = pending.pop()
        if isinstance(current, Array):
            pending.extend(current.items)
            current.items = ()
        elif isinstance(current, Object):
            pending.extend(member.value for member in current.members)
            current.members = ()
        elif isinstance(current, String):
            current.value = ""


def to_python(
    value: Value,
    object_hook: ObjectHook = None,
    object_pairs_hook: ObjectPairsHook = None,
) -> Any:
    """
    Converts a value tree to native Python objects.

    Objects become dicts (the last duplicate key wins) unless
    object_pairs_hook is given, which receives every member in order and
    takes priority over object_hook.
    """
    match value:
        case Null():
            return None
        case Boolean(flag) | Number(flag) | String(flag):
            return flag
        case Array(items):
            return [
                to_python(item, object_hook, object_pairs_hook)
                for item in items
            ]
        case Object(members):
            pairs = [
                (
                    member.key,
                    to_python(member.value, object_hook, object_pairs_hook),
                )
                for member in members
            ]
            if object_pairs_hook:
                return object_pairs_hook(pairs)
            obj = dict(pairs)
            if object_hook:
                return object_hook(obj)
            return obj
    raise TypeError(f"Object of type {type(value).__name__} is not a Value")
