"""
Recursive-descent parser over the token sequence.

A single cursor walks the tokens with one token of lookahead and never
backtracks. Arrays and objects accumulate into a GrowableBuffer and are
frozen into tuples once their closing token is seen; on any failure every
element built so far is released with ``free`` before the error propagates.
"""

import logging
from typing import Any
from typing import Final

from jzonc._buffer import GrowableBuffer
from jzonc._config import ParseConfig
from jzonc._errors import AllocationError
from jzonc._errors import JSONDecodeError
from jzonc._profile import ProfileContext
from jzonc._tokenizer import JsoncTokenizer
from jzonc._tokenizer import JsonToken
from jzonc._tokenizer import TokenType
from jzonc._value import Array
from jzonc._value import Boolean
from jzonc._value import Member
from jzonc._value import Null
from jzonc._value import Number
from jzonc._value import Object
from jzonc._value import String
from jzonc._value import Value
from jzonc._value import free

logger = logging.getLogger(__name__)

# Failures that abort a partially built container.
_ABORTS: Final = (JSONDecodeError, MemoryError, RecursionError)


class JsonParser:
    """
    Recursive-descent parser producing a Value tree.

    Borrows the token buffer; the caller destroys it after parsing.
    """

    def __init__(
        self,
        tokens: GrowableBuffer[JsonToken],
        text: str,
        config: ParseConfig | None = None,
    ):
        self.tokens = tokens
        self.text = text
        self.config = config or ParseConfig()
        self.index = 0

    def peek(self) -> JsonToken:
        """Returns the current token without consuming it."""
        return self.tokens.get(self.index)

    def _error(self, msg: str, token: JsonToken) -> JSONDecodeError:
        return JSONDecodeError(msg, self.text, token.start)

    def _new_buffer(self) -> GrowableBuffer[Any]:
        return GrowableBuffer(4, self.config.max_buffer_capacity)

    def parse_value(self) -> Value:
        """Parses any value starting at the current token."""
        token = self.peek()
        match token.type:
            case TokenType.LEFT_BRACKET:
                return self.parse_array()
            case TokenType.LEFT_BRACE:
                return self.parse_object()
            case TokenType.NULL:
                value: Value = Null()
            case TokenType.TRUE:
                value = Boolean(True)
            case TokenType.FALSE:
                value = Boolean(False)
            case TokenType.NUMBER:
                value = Number(token.value)  # type: ignore[arg-type]
            case TokenType.STRING:
                value = String(token.value)  # type: ignore[arg-type]
            case _:
                raise self._error("Expecting value", token)
        self.index += 1
        return value

    def parse_array(self) -> Array:
        """Parses an array; the current token is its opening bracket."""
        with ProfileContext("parse_array"):
            self.index += 1
            if self.peek().type is TokenType.RIGHT_BRACKET:
                self.index += 1
                return Array()

            values: GrowableBuffer[Value] = self._new_buffer()
            try:
                _push_or_free(values, self.parse_value())
                while self.peek().type is TokenType.COMMA:
                    self.index += 1
                    if self.peek().type is TokenType.RIGHT_BRACKET:
                        break
                    _push_or_free(values, self.parse_value())

                token = self.peek()
                if token.type is not TokenType.RIGHT_BRACKET:
                    raise self._error("Expecting ',' delimiter", token)
                self.index += 1
                return Array(values.freeze())
            except _ABORTS:
                for value in values:
                    free(value)
                raise
            finally:
                values.destroy()

    def _parse_member(self) -> Member:
        token = self.peek()
        if token.type is not TokenType.STRING:
            raise self._error(
                "Expecting property name enclosed in double quotes", token
            )
        key: str = token.value  # type: ignore[assignment]
        self.index += 1

        token = self.peek()
        if token.type is not TokenType.COLON:
            raise self._error("Expecting ':' delimiter", token)
        self.index += 1

        return Member(key, self.parse_value())

    def parse_object(self) -> Object:
        """Parses an object; the current token is its opening brace."""
        with ProfileContext("parse_object"):
            self.index += 1
            if self.peek().type is TokenType.RIGHT_BRACE:
                self.index += 1
                return Object()

            members: GrowableBuffer[Member] = self._new_buffer()
            try:
                _push_or_free(members, self._parse_member())
                while self.peek().type is TokenType.COMMA:
                    self.index += 1
                    if self.peek().type is TokenType.RIGHT_BRACE:
                        break
                    _push_or_free(members, self._parse_member())

                token = self.peek()
                if token.type is not TokenType.RIGHT_BRACE:
                    raise self._error("Expecting ',' delimiter", token)
                self.index += 1
                return Object(members.freeze())
            except _ABORTS:
                for member in members:
                    free(member.value)
                raise
            finally:
                members.destroy()


def _push_or_free(buffer: GrowableBuffer[Any], item: Value | Member) -> None:
    """Pushes ``item``, releasing it if the buffer cannot grow."""
    try:
        buffer.push(item)
    except MemoryError:
        free(item.value if isinstance(item, Member) else item)
        raise


def parse_document(source: str, config: ParseConfig) -> Value:
    """
    Tokenizes and parses a whole document.

    Exactly one value must precede the end of input. Raises JSONDecodeError
    for malformed input and AllocationError (a MemoryError) when a resource
    limit is hit; no partial tree survives either.
    """
    tokens = JsoncTokenizer(source, config).tokenize()
    try:
        parser = JsonParser(tokens, source, config)
        try:
            value = parser.parse_value()
        except RecursionError as exc:
            raise AllocationError("Maximum nesting depth exceeded") from exc

        token = parser.peek()
        if token.type is not TokenType.EOF:
            free(value)
            raise JSONDecodeError("Extra data", source, token.start)

        logger.debug("Parsed %d tokens", len(tokens))
        return value
    finally:
        tokens.destroy()
