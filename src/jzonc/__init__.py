"""
Parser for JSON with comments.

Accepts standard JSON plus ``//`` and ``/* */`` comments and trailing
commas in arrays and objects. ``parse`` returns an owned value tree wrapped
in a result object; ``loads`` returns native Python objects and raises on
failure, mirroring the standard library json module.
"""

import logging
from dataclasses import dataclass
from typing import Any
from typing import ClassVar

from jzonc._config import ParseConfig
from jzonc._errors import AllocationError
from jzonc._errors import JSONDecodeError
from jzonc._parser import parse_document
from jzonc._profile import HotPathStats
from jzonc._profile import clear_hot_path_stats
from jzonc._profile import get_hot_path_stats
from jzonc._value import Array
from jzonc._value import Boolean
from jzonc._value import Member
from jzonc._value import Null
from jzonc._value import Number
from jzonc._value import Object
from jzonc._value import String
from jzonc._value import Value
from jzonc._value import ValueKind
from jzonc._value import free
from jzonc._value import to_python

__version__ = "0.1.0"

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# Native Python rendition of a value tree - recursive definition
JsonValue = (
    str | float | bool | None | dict[str, "JsonValue"] | list["JsonValue"]
)
# Hooks may replace objects with arbitrary types
JsonValueOrTransformed = JsonValue | Any


@dataclass(frozen=True)
class Ok:
    """Successful parse holding the caller-owned value tree."""

    value: Value
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class SyntaxFailure:
    """Input is not well-formed; no tree was produced."""

    error: JSONDecodeError
    ok: ClassVar[bool] = False


@dataclass(frozen=True)
class AllocationFailure:
    """A resource was exhausted; no tree was produced."""

    error: MemoryError
    ok: ClassVar[bool] = False


ParseResult = Ok | SyntaxFailure | AllocationFailure


def _decode_source(source: str | bytes) -> str:
    if isinstance(source, str):
        return source
    if isinstance(source, bytes | bytearray | memoryview):
        # Undecodable bytes become lone surrogates, which are only
        # accepted inside string literals and fail UTF-8 validation there.
        return bytes(source).decode("utf-8", "surrogateescape")
    raise TypeError(
        "the JSONC object must be str, bytes or bytearray, "
        f"not {type(source).__name__}"
    )


def parse(source: str | bytes, **kwargs: Any) -> ParseResult:
    """
    Parses JSONC text into a value tree.

    Returns Ok with a tree the caller releases with free(), SyntaxFailure
    for malformed input, or AllocationFailure when a resource limit is
    exhausted. Keyword arguments build a ParseConfig.
    """
    config = ParseConfig(**kwargs)
    text = _decode_source(source)
    try:
        return Ok(parse_document(text, config))
    except JSONDecodeError as exc:
        logger.debug("Syntax error: %s", exc)
        return SyntaxFailure(exc)
    except MemoryError as exc:
        logger.debug("Allocation failure: %s", exc)
        return AllocationFailure(exc)


def loads(s: str | bytes, **kwargs: Any) -> JsonValueOrTransformed:
    """
    Parses JSONC text into native Python objects.

    Objects become dicts unless object_pairs_hook/object_hook say otherwise,
    numbers become floats. Raises JSONDecodeError for malformed input and
    AllocationError when a resource limit is exhausted.
    """
    config = ParseConfig(**kwargs)
    value = parse_document(_decode_source(s), config)
    try:
        return to_python(value, config.object_hook, config.object_pairs_hook)
    finally:
        free(value)


__all__ = [
    "AllocationError",
    "AllocationFailure",
    "Array",
    "Boolean",
    "HotPathStats",
    "JSONDecodeError",
    "JsonValue",
    "JsonValueOrTransformed",
    "Member",
    "Null",
    "Number",
    "Object",
    "Ok",
    "ParseConfig",
    "ParseResult",
    "String",
    "SyntaxFailure",
    "Value",
    "ValueKind",
    "clear_hot_path_stats",
    "free",
    "get_hot_path_stats",
    "loads",
    "parse",
    "to_python",
]
