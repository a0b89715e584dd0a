"""Structured Field Values recursive-descent parser.

Converts an ASCII field value into a ``List``, ``Dictionary`` or ``Item``
value tree, following the parsing algorithms of RFC 8941 section 4.2.

The ``Parser`` owns an explicit cursor (source text plus position) and
each ``parse_*`` method consumes exactly the text of the production it
parses, leaving the cursor just past it.  Productions nest as:

    field > list | dictionary | item
    list / dictionary > item-or-inner-list > inner-list > item
    item > bare-item + parameters > key

Error handling
--------------
There is no recovery.  The first rule that fails raises ``ParseError``
and the whole field value must be treated as absent; a partially parsed
value is never returned.
"""
from __future__ import annotations

import base64
import binascii
import decimal
import logging

from sfv.ast.nodes import (
    BareItem,
    Boolean,
    ByteSequence,
    Decimal,
    Dictionary,
    FieldType,
    InnerList,
    Integer,
    Item,
    List,
    Member,
    Parameters,
    String,
    Token,
    Value,
)
from sfv.grammar.charclass import (
    OWS,
    SP,
    is_base64_char,
    is_digit,
    is_key_char,
    is_key_start,
    is_sp_or_vchar,
    is_token_char,
    is_token_start,
)
from sfv.parser.errors import ErrorKind, ParseError

logger = logging.getLogger(__name__)

_MAX_INTEGER_DIGITS = 15
_MAX_DECIMAL_CHARS = 16
_MAX_DECIMAL_INTEGER_DIGITS = 12
_MAX_FRACTIONAL_DIGITS = 3


class Parser:
    """Single-use parser over one field value.

    Parameters
    ----------
    source:
        The ASCII field value.  ``parse`` performs the ASCII check; the
        ``Parser`` itself accepts any string so individual productions can
        be exercised directly.
    """

    __slots__ = ("_source", "_pos")

    def __init__(self, source: str) -> None:
        self._source: str = source
        self._pos: int = 0

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    @property
    def position(self) -> int:
        """0-based offset of the next unconsumed character."""
        return self._pos

    @property
    def remaining(self) -> str:
        """The unconsumed part of the source."""
        return self._source[self._pos :]

    def at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _current(self) -> str:
        """Return the character at the current position without advancing."""
        return self._source[self._pos] if self._pos < len(self._source) else ""

    def _advance(self) -> str:
        """Consume and return the current character."""
        ch = self._source[self._pos]
        self._pos += 1
        return ch

    def _skip(self, chars: str) -> None:
        """Discard any leading characters found in ``chars``."""
        while self._pos < len(self._source) and self._source[self._pos] in chars:
            self._pos += 1

    def _error(self, kind: ErrorKind, message: str, offset: int | None = None) -> ParseError:
        return ParseError(kind=kind, message=message, offset=self._pos if offset is None else offset)

    def _describe_current(self) -> str:
        return "end of input" if self.at_end() else repr(self._current())

    # ------------------------------------------------------------------
    # Top level
    # ------------------------------------------------------------------

    def parse_field(self, field_type: FieldType | str) -> Value:
        """Parse the whole source as ``field_type``.

        Leading and trailing SP are discarded; anything else left after the
        value fails with ``TRAILING_GARBAGE``.
        """
        field_type = FieldType.coerce(field_type)
        self._skip(SP)
        output: Value
        if field_type is FieldType.LIST:
            output = self.parse_list()
        elif field_type is FieldType.DICTIONARY:
            output = self.parse_dictionary()
        else:
            output = self.parse_item()
        self._skip(SP)
        if not self.at_end():
            raise self._error(
                ErrorKind.TRAILING_GARBAGE,
                f"unexpected {self._describe_current()} after {field_type.value}",
            )
        return output

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def parse_list(self) -> List:
        """Parse an sf-list."""
        members: list[Member] = []
        while not self.at_end():
            members.append(self.parse_item_or_inner_list())
            if self._end_of_member():
                break
        return List(tuple(members))

    def parse_dictionary(self) -> Dictionary:
        """Parse an sf-dictionary.

        A repeated key overwrites the earlier value but keeps its position.
        """
        members: dict[str, Member] = {}
        while not self.at_end():
            key = self.parse_key()
            if self._current() == "=":
                self._pos += 1
                member = self.parse_item_or_inner_list()
            else:
                member = Item(Boolean(True), self.parse_parameters())
            members[key] = member
            if self._end_of_member():
                break
        return Dictionary(tuple(members.items()))

    def _end_of_member(self) -> bool:
        """Consume the separator after a list or dictionary member.

        Returns True when the input is exhausted after the member.
        """
        self._skip(OWS)
        if self.at_end():
            return True
        if self._current() != ",":
            raise self._error(
                ErrorKind.EXPECTED_COMMA,
                f"expected ',' between members, found {self._describe_current()}",
            )
        self._pos += 1
        self._skip(OWS)
        if self.at_end():
            raise self._error(ErrorKind.TRAILING_COMMA, "trailing ',' after last member")
        return False

    def parse_item_or_inner_list(self) -> Member:
        if self._current() == "(":
            return self.parse_inner_list()
        return self.parse_item()

    def parse_inner_list(self) -> InnerList:
        """Parse a parenthesized inner list and its parameters."""
        start = self._pos
        if self._current() != "(":
            raise self._error(
                ErrorKind.UNRECOGNIZED_ITEM_TYPE,
                f"expected '(' to open an inner list, found {self._describe_current()}",
            )
        self._pos += 1
        items: list[Item] = []
        while not self.at_end():
            self._skip(SP)
            if self.at_end():
                break
            if self._current() == ")":
                self._pos += 1
                return InnerList(tuple(items), self.parse_parameters())
            items.append(self.parse_item())
            if self.at_end():
                break
            if self._current() not in (SP, ")"):
                raise self._error(
                    ErrorKind.MALFORMED_INNER_LIST_SEPARATOR,
                    f"expected SP or ')' after inner list item, found {self._describe_current()}",
                )
        raise self._error(
            ErrorKind.UNTERMINATED_INNER_LIST,
            "inner list is missing its closing ')'",
            offset=start,
        )

    # ------------------------------------------------------------------
    # Items, parameters and keys
    # ------------------------------------------------------------------

    def parse_item(self) -> Item:
        bare = self.parse_bare_item()
        return Item(bare, self.parse_parameters())

    def parse_parameters(self) -> Parameters:
        """Parse a ``;``-separated parameter sequence (possibly empty).

        A repeated key overwrites the earlier value but keeps its position.
        """
        params: dict[str, BareItem] = {}
        while self._current() == ";":
            self._pos += 1
            self._skip(SP)
            key = self.parse_key()
            value: BareItem = Boolean(True)
            if self._current() == "=":
                self._pos += 1
                value = self.parse_bare_item()
            params[key] = value
        return Parameters(tuple(params.items()))

    def parse_key(self) -> str:
        if not is_key_start(self._current()):
            raise self._error(
                ErrorKind.INVALID_KEY_START,
                f"key must start with a lowercase letter or '*', found {self._describe_current()}",
            )
        start = self._pos
        while is_key_char(self._current()):
            self._pos += 1
        return self._source[start : self._pos]

    # ------------------------------------------------------------------
    # Bare items
    # ------------------------------------------------------------------

    def parse_bare_item(self) -> BareItem:
        """Dispatch on the first character to the matching bare item rule."""
        ch = self._current()
        if ch == "-" or is_digit(ch):
            return self.parse_number()
        if ch == '"':
            return self.parse_string()
        if is_token_start(ch):
            return self.parse_token()
        if ch == ":":
            return self.parse_byte_sequence()
        if ch == "?":
            return self.parse_boolean()
        raise self._error(
            ErrorKind.UNRECOGNIZED_ITEM_TYPE,
            f"no item type starts with {self._describe_current()}",
        )

    def parse_number(self) -> Integer | Decimal:
        """Parse an sf-integer or sf-decimal."""
        negative = False
        if self._current() == "-":
            self._pos += 1
            negative = True
        if not is_digit(self._current()):
            raise self._error(
                ErrorKind.EMPTY_OR_INVALID_NUMBER,
                f"expected a digit, found {self._describe_current()}",
            )

        is_decimal = False
        chars: list[str] = []
        while not self.at_end():
            ch = self._current()
            if is_digit(ch):
                chars.append(ch)
            elif ch == "." and not is_decimal:
                if len(chars) > _MAX_DECIMAL_INTEGER_DIGITS:
                    raise self._error(
                        ErrorKind.DECIMAL_INTEGER_PART_TOO_LONG,
                        f"decimal has more than {_MAX_DECIMAL_INTEGER_DIGITS} integer digits",
                    )
                chars.append(ch)
                is_decimal = True
            else:
                break
            self._pos += 1
            if not is_decimal and len(chars) > _MAX_INTEGER_DIGITS:
                raise self._error(
                    ErrorKind.INTEGER_TOO_LONG,
                    f"integer has more than {_MAX_INTEGER_DIGITS} digits",
                )
            if is_decimal and len(chars) > _MAX_DECIMAL_CHARS:
                raise self._error(
                    ErrorKind.DECIMAL_TOO_LONG,
                    f"decimal has more than {_MAX_DECIMAL_CHARS} characters",
                )

        number = "".join(chars)
        if not is_decimal:
            magnitude = int(number)
            return Integer(-magnitude if negative else magnitude)

        if number.endswith("."):
            raise self._error(ErrorKind.TRAILING_DECIMAL_POINT, "decimal ends with '.'")
        fractional_digits = len(number) - number.index(".") - 1
        if fractional_digits > _MAX_FRACTIONAL_DIGITS:
            raise self._error(
                ErrorKind.TOO_MANY_FRACTIONAL_DIGITS,
                f"decimal has {fractional_digits} fractional digits (at most {_MAX_FRACTIONAL_DIGITS})",
            )
        magnitude_decimal = decimal.Decimal(number)
        return Decimal(magnitude_decimal.copy_negate() if negative else magnitude_decimal)

    def parse_string(self) -> String:
        """Parse a double-quoted sf-string, resolving ``\\"`` and ``\\\\``."""
        start = self._pos
        if self._current() != '"':
            raise self._error(
                ErrorKind.UNRECOGNIZED_ITEM_TYPE,
                f"expected '\"' to open a string, found {self._describe_current()}",
            )
        self._pos += 1
        buf: list[str] = []
        while not self.at_end():
            ch = self._advance()
            if ch == "\\":
                if self.at_end():
                    raise self._error(ErrorKind.INVALID_ESCAPE, "string ends inside an escape")
                escaped = self._advance()
                if escaped not in ('"', "\\"):
                    raise self._error(
                        ErrorKind.INVALID_ESCAPE,
                        f"only '\\\"' and '\\\\' escapes are allowed, found '\\{escaped}'",
                        offset=self._pos - 2,
                    )
                buf.append(escaped)
            elif ch == '"':
                return String("".join(buf))
            elif not is_sp_or_vchar(ch):
                raise self._error(
                    ErrorKind.CONTROL_CHARACTER_IN_STRING,
                    f"character {ch!r} is not allowed in a string",
                    offset=self._pos - 1,
                )
            else:
                buf.append(ch)
        raise self._error(
            ErrorKind.UNTERMINATED_STRING,
            "string is missing its closing '\"'",
            offset=start,
        )

    def parse_token(self) -> Token:
        if not is_token_start(self._current()):
            raise self._error(
                ErrorKind.INVALID_TOKEN_START,
                f"token must start with a letter or '*', found {self._describe_current()}",
            )
        start = self._pos
        while is_token_char(self._current()):
            self._pos += 1
        return Token(self._source[start : self._pos])

    def parse_byte_sequence(self) -> ByteSequence:
        """Parse a colon-delimited base64 sf-binary.

        Missing ``=`` padding is synthesized; characters outside the base64
        alphabet (line breaks included) are rejected.
        """
        start = self._pos
        if self._current() != ":":
            raise self._error(
                ErrorKind.UNRECOGNIZED_ITEM_TYPE,
                f"expected ':' to open a byte sequence, found {self._describe_current()}",
            )
        content_start = start + 1
        end = self._source.find(":", content_start)
        if end == -1:
            raise self._error(
                ErrorKind.UNTERMINATED_BYTE_SEQUENCE,
                "byte sequence is missing its closing ':'",
                offset=start,
            )
        content = self._source[content_start:end]
        self._pos = end + 1

        for index, ch in enumerate(content):
            if not is_base64_char(ch):
                raise self._error(
                    ErrorKind.INVALID_BASE64_ALPHABET,
                    f"character {ch!r} is not in the base64 alphabet",
                    offset=content_start + index,
                )

        unpadded = content.rstrip("=")
        if "=" in unpadded or len(unpadded) % 4 == 1:
            raise self._error(
                ErrorKind.BASE64_DECODE_ERROR,
                f"{content!r} is not valid base64",
                offset=content_start,
            )
        try:
            data = base64.b64decode(unpadded + "=" * (-len(unpadded) % 4), validate=True)
        except binascii.Error as exc:
            raise self._error(
                ErrorKind.BASE64_DECODE_ERROR,
                f"{content!r} is not valid base64: {exc}",
                offset=content_start,
            ) from exc
        return ByteSequence(data)

    def parse_boolean(self) -> Boolean:
        if self._current() != "?":
            raise self._error(
                ErrorKind.UNRECOGNIZED_ITEM_TYPE,
                f"expected '?' to open a boolean, found {self._describe_current()}",
            )
        self._pos += 1
        ch = self._current()
        if ch == "1":
            self._pos += 1
            return Boolean(True)
        if ch == "0":
            self._pos += 1
            return Boolean(False)
        raise self._error(
            ErrorKind.INVALID_BOOLEAN,
            f"boolean must be '?0' or '?1', found {self._describe_current()} after '?'",
        )


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def parse(data: bytes | bytearray | memoryview | str, field_type: FieldType | str) -> Value:
    """Parse a field value as a List, Dictionary or Item.

    Parameters
    ----------
    data:
        The raw field value, as bytes or text.  Must be pure ASCII.
    field_type:
        ``FieldType`` (or its string value) naming the expected top-level
        structure.

    Returns
    -------
    List | Dictionary | Item
        The parsed value tree.

    Raises
    ------
    ParseError
        If the input is not ASCII or does not match the grammar.  The whole
        value is rejected; callers should treat the field as absent.
    ValueError
        If ``field_type`` is not a known field type.

    Example
    -------
    ::

        from sfv.parser import parse
        value = parse(b"text/html;q=1.0", "list")
    """
    field_type = FieldType.coerce(field_type)
    if isinstance(data, (bytes, bytearray, memoryview)):
        try:
            text = bytes(data).decode("ascii")
        except UnicodeDecodeError as exc:
            raise ParseError(
                kind=ErrorKind.NON_ASCII_INPUT,
                message=f"byte 0x{bytes(data)[exc.start]:02x} is not ASCII",
                offset=exc.start,
            ) from None
    else:
        text = data
        if not text.isascii():
            offset = next(i for i, ch in enumerate(text) if not ch.isascii())
            raise ParseError(
                kind=ErrorKind.NON_ASCII_INPUT,
                message=f"character {text[offset]!r} is not ASCII",
                offset=offset,
            )

    try:
        return Parser(text).parse_field(field_type)
    except ParseError as exc:
        logger.debug("Rejected %s field value %r: %s", field_type.value, text, exc)
        raise
