"""
Character-level tokenizer for JSON with comments.

An explicit state machine: each state has a handler that consumes one
character and returns the next state. The empty string stands for end of
input, so every handler sees it exactly once at the end of the document.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from enum import auto
from typing import Final

from jzonc._buffer import GrowableBuffer
from jzonc._config import ParseConfig
from jzonc._errors import JSONDecodeError
from jzonc._errors import Position
from jzonc._profile import ProfileContext

logger = logging.getLogger(__name__)

EOF: Final = ""

_WHITESPACE: Final = frozenset(" \t\n\r")
_DIGITS: Final = frozenset("0123456789")
_NONZERO_DIGITS: Final = frozenset("123456789")
_HEX_DIGITS: Final = frozenset("0123456789abcdefABCDEF")
_CONTROL_LIMIT: Final = 0x20

_ESCAPES: Final = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_HIGH_SURROGATES: Final = range(0xD800, 0xDC00)
_LOW_SURROGATES: Final = range(0xDC00, 0xE000)

# Any finite nonzero double saturates to 0.0 or inf within this many
# decimal places, so larger exponents are clamped while accumulating.
_EXPONENT_LIMIT: Final = 1000
_SATURATED: Final = (0.0, float("inf"), -float("inf"))


class TokenType(Enum):
    EOF = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    LEFT_BRACKET = auto()
    RIGHT_BRACKET = auto()
    COMMA = auto()
    COLON = auto()
    STRING = auto()
    NUMBER = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()


_PUNCTUATION: Final = {
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
}


class TokenizerState(Enum):
    """States of the tokenizer; ERROR is terminal."""

    ERROR = auto()
    DEFAULT = auto()
    KEYWORD_T = auto()
    KEYWORD_TR = auto()
    KEYWORD_TRU = auto()
    KEYWORD_F = auto()
    KEYWORD_FA = auto()
    KEYWORD_FAL = auto()
    KEYWORD_FALS = auto()
    KEYWORD_N = auto()
    KEYWORD_NU = auto()
    KEYWORD_NUL = auto()
    STRING_ANY = auto()
    STRING_BACKSLASH = auto()
    STRING_U0 = auto()
    STRING_U1 = auto()
    STRING_U2 = auto()
    STRING_U3 = auto()
    STRING_SURROGATE = auto()
    STRING_SURROGATE_U = auto()
    NUMBER_SIGN = auto()
    NUMBER_ZERO = auto()
    NUMBER_INTEGER = auto()
    NUMBER_DOT = auto()
    NUMBER_FRACTION = auto()
    NUMBER_E = auto()
    NUMBER_E_SIGN = auto()
    NUMBER_E_DIGIT = auto()
    SLASH = auto()
    SINGLE_LINE_COMMENT = auto()
    MULTI_LINE_COMMENT = auto()
    MULTI_LINE_COMMENT_STAR = auto()


# Keyword state -> (expected character, next state, token on completion)
_KEYWORD_STEPS: Final[
    dict[TokenizerState, tuple[str, TokenizerState, TokenType | None]]
] = {
    TokenizerState.KEYWORD_T: ("r", TokenizerState.KEYWORD_TR, None),
    TokenizerState.KEYWORD_TR: ("u", TokenizerState.KEYWORD_TRU, None),
    TokenizerState.KEYWORD_TRU: ("e", TokenizerState.DEFAULT, TokenType.TRUE),
    TokenizerState.KEYWORD_F: ("a", TokenizerState.KEYWORD_FA, None),
    TokenizerState.KEYWORD_FA: ("l", TokenizerState.KEYWORD_FAL, None),
    TokenizerState.KEYWORD_FAL: ("s", TokenizerState.KEYWORD_FALS, None),
    TokenizerState.KEYWORD_FALS: (
        "e",
        TokenizerState.DEFAULT,
        TokenType.FALSE,
    ),
    TokenizerState.KEYWORD_N: ("u", TokenizerState.KEYWORD_NU, None),
    TokenizerState.KEYWORD_NU: ("l", TokenizerState.KEYWORD_NUL, None),
    TokenizerState.KEYWORD_NUL: ("l", TokenizerState.DEFAULT, TokenType.NULL),
}

_KEYWORD_STARTS: Final = {
    "t": TokenizerState.KEYWORD_T,
    "f": TokenizerState.KEYWORD_F,
    "n": TokenizerState.KEYWORD_N,
}

_HEX_STATES: Final = {
    TokenizerState.STRING_U0: TokenizerState.STRING_U1,
    TokenizerState.STRING_U1: TokenizerState.STRING_U2,
    TokenizerState.STRING_U2: TokenizerState.STRING_U3,
}


@dataclass(frozen=True)
class JsonToken:
    """
    Represents a token with its source span.

    STRING tokens carry the decoded text and NUMBER tokens the converted
    float; every other token carries None.
    """

    type: TokenType
    value: str | float | None
    start: Position
    end: Position


def scale_by_exponent(mantissa: float, exponent: int) -> float:
    """Scales ``mantissa`` by 10**exponent one decimal place at a time."""
    while exponent < 0 and mantissa not in _SATURATED:
        exponent += 1
        mantissa /= 10
    while exponent > 0 and mantissa not in _SATURATED:
        exponent -= 1
        mantissa *= 10
    return mantissa


class JsoncTokenizer:
    """
    Tokenizes JSONC input one character at a time.

    Handles whitespace, comments, strings, numbers, literals and structural
    tokens. Raises JSONDecodeError on the first undefined transition, after
    releasing every token and scratch buffer built so far.
    """

    def __init__(self, text: str, config: ParseConfig | None = None):
        self.text = text
        self.length = len(text)
        self.config = config or ParseConfig()
        self.state = TokenizerState.DEFAULT
        self.tokens: GrowableBuffer[JsonToken] = GrowableBuffer(
            128, self.config.max_buffer_capacity
        )

        self._token_start: Position = 0
        self._error_msg = ""
        self._error_pos: Position = 0

        # String scratch state
        self._builder: GrowableBuffer[bytes] | None = None
        self._code_unit = 0
        self._high_surrogate = 0

        # Number accumulation state
        self._mantissa = 0.0
        self._place_value = 1.0
        self._sign = 1
        self._exponent = 0
        self._exponent_sign = 1

        keyword = self._ts_keyword
        hex_digit = self._ts_string_hex
        self._handlers: dict[
            TokenizerState, Callable[[str, Position], TokenizerState]
        ] = {
            TokenizerState.DEFAULT: self._ts_default,
            TokenizerState.KEYWORD_T: keyword,
            TokenizerState.KEYWORD_TR: keyword,
            TokenizerState.KEYWORD_TRU: keyword,
            TokenizerState.KEYWORD_F: keyword,
            TokenizerState.KEYWORD_FA: keyword,
            TokenizerState.KEYWORD_FAL: keyword,
            TokenizerState.KEYWORD_FALS: keyword,
            TokenizerState.KEYWORD_N: keyword,
            TokenizerState.KEYWORD_NU: keyword,
            TokenizerState.KEYWORD_NUL: keyword,
            TokenizerState.STRING_ANY: self._ts_string_any,
            TokenizerState.STRING_BACKSLASH: self._ts_string_backslash,
            TokenizerState.STRING_U0: hex_digit,
            TokenizerState.STRING_U1: hex_digit,
            TokenizerState.STRING_U2: hex_digit,
            TokenizerState.STRING_U3: self._ts_string_u3,
            TokenizerState.STRING_SURROGATE: self._ts_string_surrogate,
            TokenizerState.STRING_SURROGATE_U: self._ts_string_surrogate_u,
            TokenizerState.NUMBER_SIGN: self._ts_number_sign,
            TokenizerState.NUMBER_ZERO: self._ts_number_zero,
            TokenizerState.NUMBER_INTEGER: self._ts_number_integer,
            TokenizerState.NUMBER_DOT: self._ts_number_dot,
            TokenizerState.NUMBER_FRACTION: self._ts_number_fraction,
            TokenizerState.NUMBER_E: self._ts_number_e,
            TokenizerState.NUMBER_E_SIGN: self._ts_number_e_sign,
            TokenizerState.NUMBER_E_DIGIT: self._ts_number_e_digit,
            TokenizerState.SLASH: self._ts_slash,
            TokenizerState.SINGLE_LINE_COMMENT: self._ts_single_line_comment,
            TokenizerState.MULTI_LINE_COMMENT: self._ts_multi_line_comment,
            TokenizerState.MULTI_LINE_COMMENT_STAR: (
                self._ts_multi_line_comment_star
            ),
        }

    def tokenize(self) -> GrowableBuffer[JsonToken]:
        """
        Runs the state machine over the whole input.

        Returns the token buffer, terminated by exactly one EOF token. The
        caller owns the buffer and destroys it when parsing is done.
        """
        with ProfileContext("tokenize", self.length):
            try:
                for pos in range(self.length + 1):
                    char = self.text[pos] if pos < self.length else EOF
                    self.state = self._handlers[self.state](char, pos)
                    if self.state is TokenizerState.ERROR:
                        break
            except MemoryError:
                self._release()
                raise

            if self.state is TokenizerState.ERROR:
                self._release()
                logger.debug(
                    "Tokenizer stopped: %s at %d",
                    self._error_msg,
                    self._error_pos,
                )
                raise JSONDecodeError(
                    self._error_msg, self.text, self._error_pos
                )

            logger.debug("Tokenized %d characters", self.length)
            return self.tokens

    def _release(self) -> None:
        if self._builder is not None:
            self._builder.destroy()
            self._builder = None
        self.tokens.destroy()

    def _fail(self, msg: str, pos: Position) -> TokenizerState:
        self._error_msg = msg
        self._error_pos = pos
        return TokenizerState.ERROR

    def _emit(
        self,
        token_type: TokenType,
        start: Position,
        end: Position,
        value: str | float | None = None,
    ) -> None:
        self.tokens.push(JsonToken(token_type, value, start, end))

    # Default / whitespace

    def _ts_default(self, char: str, pos: Position) -> TokenizerState:
        if char == EOF:
            self._emit(TokenType.EOF, pos, pos)
            return TokenizerState.DEFAULT
        if char in _PUNCTUATION:
            self._emit(_PUNCTUATION[char], pos, pos + 1)
            return TokenizerState.DEFAULT
        if char in _WHITESPACE:
            return TokenizerState.DEFAULT
        if char in _KEYWORD_STARTS:
            self._token_start = pos
            return _KEYWORD_STARTS[char]
        if char == "/":
            return TokenizerState.SLASH
        if char == "-" or char in _DIGITS:
            return self._start_number(char, pos)
        if char == '"':
            self._token_start = pos
            self._builder = GrowableBuffer(
                128, self.config.max_buffer_capacity
            )
            self._code_unit = 0
            self._high_surrogate = 0
            return TokenizerState.STRING_ANY
        return self._fail("Expecting value", pos)

    # Literal keywords

    def _ts_keyword(self, char: str, pos: Position) -> TokenizerState:
        expected, next_state, token_type = _KEYWORD_STEPS[self.state]
        if char != expected:
            return self._fail("Invalid literal", self._token_start)
        if token_type is not None:
            self._emit(token_type, self._token_start, pos + 1)
        return next_state

    # Strings

    def _string_builder(self) -> GrowableBuffer[bytes]:
        builder = self._builder
        if builder is None:
            raise RuntimeError("No string is open")
        return builder

    def _push_string_bytes(self, chunk: bytes) -> None:
        self._string_builder().push(chunk)

    def _fail_string(self, msg: str, pos: Position) -> TokenizerState:
        if self._builder is not None:
            self._builder.destroy()
            self._builder = None
        return self._fail(msg, pos)

    def _ts_string_any(self, char: str, pos: Position) -> TokenizerState:
        if char == '"':
            return self._finish_string(pos)
        if char == "\\":
            return TokenizerState.STRING_BACKSLASH
        if char == EOF:
            return self._fail_string(
                "Unterminated string starting at", self._token_start
            )
        if ord(char) < _CONTROL_LIMIT:
            return self._fail_string("Invalid control character at", pos)
        # Lone surrogates survive encoding here and are rejected by the
        # UTF-8 validation when the string closes.
        self._push_string_bytes(char.encode("utf-8", "surrogatepass"))
        return TokenizerState.STRING_ANY

    def _ts_string_backslash(self, char: str, pos: Position) -> TokenizerState:
        if char == "u":
            self._code_unit = 0
            return TokenizerState.STRING_U0
        if char == EOF:
            return self._fail_string(
                "Unterminated string starting at", self._token_start
            )
        escaped = _ESCAPES.get(char)
        if escaped is None:
            return self._fail_string("Invalid \\escape", pos - 1)
        self._push_string_bytes(escaped.encode("ascii"))
        return TokenizerState.STRING_ANY

    def _hex_value(self, char: str) -> int | None:
        if char not in _HEX_DIGITS:
            return None
        return int(char, 16)

    def _ts_string_hex(self, char: str, pos: Position) -> TokenizerState:
        digit = self._hex_value(char)
        if digit is None:
            return self._fail_string("Invalid \\uXXXX escape", pos)
        self._code_unit = (self._code_unit << 4) | digit
        return _HEX_STATES[self.state]

    def _ts_string_u3(self, char: str, pos: Position) -> TokenizerState:
        digit = self._hex_value(char)
        if digit is None:
            return self._fail_string("Invalid \\uXXXX escape", pos)
        code_unit = (self._code_unit << 4) | digit

        if self._high_surrogate:
            if code_unit not in _LOW_SURROGATES:
                return self._fail_string("Unpaired surrogate", pos - 5)
            code_point = (
                0x10000
                + ((self._high_surrogate - 0xD800) << 10)
                + (code_unit - 0xDC00)
            )
            self._high_surrogate = 0
            self._push_string_bytes(chr(code_point).encode("utf-8"))
            return TokenizerState.STRING_ANY

        if code_unit in _HIGH_SURROGATES:
            self._high_surrogate = code_unit
            return TokenizerState.STRING_SURROGATE
        if code_unit in _LOW_SURROGATES:
            return self._fail_string("Unpaired surrogate", pos - 5)

        self._push_string_bytes(chr(code_unit).encode("utf-8"))
        return TokenizerState.STRING_ANY

    def _ts_string_surrogate(self, char: str, pos: Position) -> TokenizerState:
        if char == "\\":
            return TokenizerState.STRING_SURROGATE_U
        return self._fail_string("Unpaired surrogate", pos - 6)

    def _ts_string_surrogate_u(
        self, char: str, pos: Position
    ) -> TokenizerState:
        if char == "u":
            self._code_unit = 0
            return TokenizerState.STRING_U0
        return self._fail_string("Unpaired surrogate", pos - 7)

    def _finish_string(self, pos: Position) -> TokenizerState:
        builder = self._string_builder()
        raw = b"".join(builder)
        builder.destroy()
        self._builder = None
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            return self._fail("Invalid UTF-8 in string", self._token_start)
        self._emit(TokenType.STRING, self._token_start, pos + 1, text)
        return TokenizerState.DEFAULT

    # Numbers

    def _start_number(self, char: str, pos: Position) -> TokenizerState:
        self._token_start = pos
        self._mantissa = 0.0
        self._place_value = 1.0
        self._sign = 1
        self._exponent = 0
        self._exponent_sign = 1
        if char == "-":
            self._sign = -1
            return TokenizerState.NUMBER_SIGN
        if char == "0":
            return TokenizerState.NUMBER_ZERO
        self._mantissa = float(ord(char) - ord("0"))
        return TokenizerState.NUMBER_INTEGER

    def _finish_number(self, char: str, pos: Position) -> TokenizerState:
        if self.config.correctly_rounded:
            number = float(self.text[self._token_start : pos])
        else:
            number = scale_by_exponent(
                self._mantissa * self._sign,
                self._exponent * self._exponent_sign,
            )
        self._emit(TokenType.NUMBER, self._token_start, pos, number)
        return self._ts_default(char, pos)

    def _ts_number_sign(self, char: str, pos: Position) -> TokenizerState:
        if char == "0":
            return TokenizerState.NUMBER_ZERO
        if char in _NONZERO_DIGITS:
            self._mantissa = float(ord(char) - ord("0"))
            return TokenizerState.NUMBER_INTEGER
        return self._fail("Invalid number", self._token_start)

    def _ts_number_zero(self, char: str, pos: Position) -> TokenizerState:
        if char == ".":
            return TokenizerState.NUMBER_DOT
        if char in ("e", "E"):
            return TokenizerState.NUMBER_E
        if char in _DIGITS:
            return self._fail("Leading zeros not allowed", self._token_start)
        return self._finish_number(char, pos)

    def _ts_number_integer(self, char: str, pos: Position) -> TokenizerState:
        if char == ".":
            return TokenizerState.NUMBER_DOT
        if char in ("e", "E"):
            return TokenizerState.NUMBER_E
        if char in _DIGITS:
            self._mantissa = self._mantissa * 10 + (ord(char) - ord("0"))
            return TokenizerState.NUMBER_INTEGER
        return self._finish_number(char, pos)

    def _add_fraction_digit(self, char: str) -> None:
        self._place_value /= 10
        self._mantissa += self._place_value * (ord(char) - ord("0"))

    def _add_exponent_digit(self, char: str) -> None:
        self._exponent = min(
            self._exponent * 10 + (ord(char) - ord("0")), _EXPONENT_LIMIT
        )

    def _ts_number_dot(self, char: str, pos: Position) -> TokenizerState:
        if char in _DIGITS:
            self._add_fraction_digit(char)
            return TokenizerState.NUMBER_FRACTION
        return self._fail("Invalid number", self._token_start)

    def _ts_number_fraction(self, char: str, pos: Position) -> TokenizerState:
        if char in ("e", "E"):
            return TokenizerState.NUMBER_E
        if char in _DIGITS:
            self._add_fraction_digit(char)
            return TokenizerState.NUMBER_FRACTION
        return self._finish_number(char, pos)

    def _ts_number_e(self, char: str, pos: Position) -> TokenizerState:
        if char in ("+", "-"):
            if char == "-":
                self._exponent_sign = -1
            return TokenizerState.NUMBER_E_SIGN
        if char in _DIGITS:
            self._add_exponent_digit(char)
            return TokenizerState.NUMBER_E_DIGIT
        return self._fail("Invalid exponent", self._token_start)

    def _ts_number_e_sign(self, char: str, pos: Position) -> TokenizerState:
        if char in _DIGITS:
            self._add_exponent_digit(char)
            return TokenizerState.NUMBER_E_DIGIT
        return self._fail("Invalid exponent", self._token_start)

    def _ts_number_e_digit(self, char: str, pos: Position) -> TokenizerState:
        if char in _DIGITS:
            self._add_exponent_digit(char)
            return TokenizerState.NUMBER_E_DIGIT
        return self._finish_number(char, pos)

    # Comments

    def _ts_slash(self, char: str, pos: Position) -> TokenizerState:
        if char == "/":
            return TokenizerState.SINGLE_LINE_COMMENT
        if char == "*":
            return TokenizerState.MULTI_LINE_COMMENT
        return self._fail("Invalid comment", pos - 1)

    def _ts_single_line_comment(
        self, char: str, pos: Position
    ) -> TokenizerState:
        if char == "\n":
            return TokenizerState.DEFAULT
        if char == EOF:
            return self._fail("Unterminated comment", pos)
        return TokenizerState.SINGLE_LINE_COMMENT

    def _ts_multi_line_comment(
        self, char: str, pos: Position
    ) -> TokenizerState:
        if char == "*":
            return TokenizerState.MULTI_LINE_COMMENT_STAR
        if char == EOF:
            return self._fail("Unterminated comment", pos)
        return TokenizerState.MULTI_LINE_COMMENT

    def _ts_multi_line_comment_star(
        self, char: str, pos: Position
    ) -> TokenizerState:
        if char == "/":
            return TokenizerState.DEFAULT
        if char == "*":
            return TokenizerState.MULTI_LINE_COMMENT_STAR
        if char == EOF:
            return self._fail("Unterminated comment", pos)
        return TokenizerState.MULTI_LINE_COMMENT
