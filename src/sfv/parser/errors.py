"""Error types for the Structured Field Values codec.

Failures are represented by a closed set of named kinds so that callers and
conformance fixtures can distinguish them without matching on messages.
Both directions are all-or-nothing: the first failure aborts the whole
operation and no partial value is returned.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class ErrorKind(Enum):
    """Every way parsing or serialization can fail.

    Parse kinds
    -----------
    NON_ASCII_INPUT
        The input contains a character outside 7-bit ASCII.
    TRAILING_GARBAGE
        Input remains after the top-level value was parsed.
    UNRECOGNIZED_ITEM_TYPE
        A bare item starts with a character no bare item type accepts.
    EMPTY_OR_INVALID_NUMBER
        A number has no digit after the optional sign.
    DECIMAL_INTEGER_PART_TOO_LONG
        A decimal point follows more than 12 integer digits.
    INTEGER_TOO_LONG
        An integer has more than 15 digits.
    DECIMAL_TOO_LONG
        A decimal has more than 16 characters including the point.
    TRAILING_DECIMAL_POINT
        A decimal ends with ``.``.
    TOO_MANY_FRACTIONAL_DIGITS
        A decimal has more than 3 digits after the point.
    INVALID_ESCAPE
        A backslash in a string is not followed by ``"`` or ``\\``.
    CONTROL_CHARACTER_IN_STRING
        A string contains a character outside SP and VCHAR.
    UNTERMINATED_STRING
        A string has no closing quote.
    INVALID_TOKEN_START
        A token does not start with ALPHA or ``*``.
    UNTERMINATED_BYTE_SEQUENCE
        A byte sequence has no closing ``:``.
    INVALID_BASE64_ALPHABET
        A byte sequence contains a character outside the base64 alphabet.
    BASE64_DECODE_ERROR
        A byte sequence uses the right alphabet but does not decode.
    INVALID_BOOLEAN
        ``?`` is not followed by ``0`` or ``1``.
    INVALID_KEY_START
        A key does not start with lcalpha or ``*``.
    MALFORMED_INNER_LIST_SEPARATOR
        An inner-list item is not followed by SP or ``)``.
    UNTERMINATED_INNER_LIST
        An inner list has no closing ``)``.
    EXPECTED_COMMA
        List or dictionary members are not separated by ``,``.
    TRAILING_COMMA
        A list or dictionary ends with ``,``.

    Serialization kinds
    -------------------
    INTEGER_OUT_OF_RANGE
        Integer magnitude exceeds 999,999,999,999,999.
    DECIMAL_OUT_OF_RANGE
        Rounded decimal has more than 12 integer digits, or is not finite.
    NON_SERIALIZABLE_CHARACTER
        A string or token contains a non-ASCII or control character.
    INVALID_TOKEN
        A token does not match the token grammar.
    INVALID_KEY
        A dictionary or parameter key does not match the key grammar.
    UNSERIALIZABLE_SHAPE
        The value is not a List, Dictionary or Item, or a node holds a
        payload of the wrong type.
    """

    # Parsing
    NON_ASCII_INPUT = auto()
    TRAILING_GARBAGE = auto()
    UNRECOGNIZED_ITEM_TYPE = auto()
    EMPTY_OR_INVALID_NUMBER = auto()
    DECIMAL_INTEGER_PART_TOO_LONG = auto()
    INTEGER_TOO_LONG = auto()
    DECIMAL_TOO_LONG = auto()
    TRAILING_DECIMAL_POINT = auto()
    TOO_MANY_FRACTIONAL_DIGITS = auto()
    INVALID_ESCAPE = auto()
    CONTROL_CHARACTER_IN_STRING = auto()
    UNTERMINATED_STRING = auto()
    INVALID_TOKEN_START = auto()
    UNTERMINATED_BYTE_SEQUENCE = auto()
    INVALID_BASE64_ALPHABET = auto()
    BASE64_DECODE_ERROR = auto()
    INVALID_BOOLEAN = auto()
    INVALID_KEY_START = auto()
    MALFORMED_INNER_LIST_SEPARATOR = auto()
    UNTERMINATED_INNER_LIST = auto()
    EXPECTED_COMMA = auto()
    TRAILING_COMMA = auto()

    # Serialization
    INTEGER_OUT_OF_RANGE = auto()
    DECIMAL_OUT_OF_RANGE = auto()
    NON_SERIALIZABLE_CHARACTER = auto()
    INVALID_TOKEN = auto()
    INVALID_KEY = auto()
    UNSERIALIZABLE_SHAPE = auto()


class StructuredFieldError(Exception):
    """Base class for every codec failure."""

    kind: ErrorKind


@dataclass(frozen=True)
class ParseError(StructuredFieldError):
    """A parse failure at a position in the input.

    Parameters
    ----------
    kind:
        Which grammar rule failed.
    message:
        Human-readable description of the error.
    offset:
        0-based character offset of the cursor when parsing failed.
    """

    kind: ErrorKind
    message: str
    offset: int

    def __str__(self) -> str:
        return f"ParseError at offset {self.offset}: {self.message} [{self.kind.name}]"

    # dataclass(frozen=True) doesn't call Exception.__init__ automatically
    def __post_init__(self) -> None:
        object.__setattr__(self, "args", (str(self),))


@dataclass(frozen=True)
class SerializationError(StructuredFieldError):
    """A serialization failure for a specific value.

    Parameters
    ----------
    kind:
        Which serialization rule failed.
    message:
        Human-readable description of the error.
    value:
        The offending object.
    """

    kind: ErrorKind
    message: str
    value: object = None

    def __str__(self) -> str:
        return f"SerializationError: {self.message} [{self.kind.name}]"

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", (str(self),))
