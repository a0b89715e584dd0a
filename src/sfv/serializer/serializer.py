"""Structured Field Values serializer: value tree -> canonical field value.

The ``Serializer`` renders a ``List``, ``Dictionary`` or ``Item`` as the
canonical ASCII text defined by RFC 8941 section 4.1:

- members separated by ``", "``, inner-list items by a single SP
- parameters as ``;key=value``, with ``=value`` omitted for Boolean true
- decimals rounded half-to-even to three fractional digits
- strings quoted with ``"`` and ``\\`` escaped

Values are validated while they are rendered; the first invalid node
raises ``SerializationError`` and no output is produced.

Usage
-----
::

    from sfv.serializer import serialize

    serialize(List((Item(Token("gzip")),)))   # b"gzip"
    serialize(List())                         # None: omit the field
"""
from __future__ import annotations

import base64
import decimal
import logging

from sfv.ast.nodes import (
    BARE_ITEM_TYPES,
    BareItem,
    Boolean,
    ByteSequence,
    Decimal,
    Dictionary,
    InnerList,
    Integer,
    Item,
    List,
    Member,
    Parameters,
    String,
    Token,
)
from sfv.grammar.charclass import is_sp_or_vchar, is_valid_key, is_valid_token
from sfv.parser.errors import ErrorKind, SerializationError

logger = logging.getLogger(__name__)

MAX_INTEGER = 999_999_999_999_999
MIN_INTEGER = -MAX_INTEGER

_DECIMAL_QUANTUM = decimal.Decimal("0.001")
_DECIMAL_INTEGER_LIMIT = decimal.Decimal(10) ** 12


class Serializer:
    """Produces canonical field values from value trees.

    The serializer is stateless; one instance can be shared freely.
    """

    def serialize(self, value: object) -> bytes | None:
        """Serialize a top-level value to ASCII bytes.

        Parameters
        ----------
        value:
            A ``List``, ``Dictionary`` or ``Item``.

        Returns
        -------
        bytes | None
            The field value, or ``None`` when ``value`` is an empty List or
            Dictionary and the field should be omitted entirely.

        Raises
        ------
        SerializationError
            If any node cannot be serialized.
        """
        if isinstance(value, (List, Dictionary)) and len(value) == 0:
            logger.debug("Omitting empty %s", type(value).__name__)
            return None
        return self.serialize_text(value).encode("ascii")

    def serialize_text(self, value: object) -> str:
        """Like ``serialize`` but returns ``str`` and renders empty containers as ``""``."""
        if isinstance(value, List):
            return self.serialize_list(value)
        if isinstance(value, Dictionary):
            return self.serialize_dictionary(value)
        if isinstance(value, Item):
            return self.serialize_item(value)
        raise SerializationError(
            kind=ErrorKind.UNSERIALIZABLE_SHAPE,
            message=f"cannot serialize {type(value).__name__} as a field value; "
            "expected List, Dictionary or Item",
            value=value,
        )

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def serialize_list(self, value: List) -> str:
        return ", ".join(self.serialize_member(member) for member in value.members)

    def serialize_dictionary(self, value: Dictionary) -> str:
        entries: list[str] = []
        for key, member in value.members:
            entry = self.serialize_key(key)
            if isinstance(member, Item) and member.bare == Boolean(True):
                entry += self.serialize_parameters(member.params)
            else:
                entry += "=" + self.serialize_member(member)
            entries.append(entry)
        return ", ".join(entries)

    def serialize_member(self, member: Member) -> str:
        if isinstance(member, InnerList):
            return self.serialize_inner_list(member)
        if isinstance(member, Item):
            return self.serialize_item(member)
        raise SerializationError(
            kind=ErrorKind.UNSERIALIZABLE_SHAPE,
            message=f"container member must be Item or InnerList, got {type(member).__name__}",
            value=member,
        )

    def serialize_inner_list(self, value: InnerList) -> str:
        inner = " ".join(self._serialize_inner_item(item) for item in value.items)
        return f"({inner}){self.serialize_parameters(value.params)}"

    def _serialize_inner_item(self, item: object) -> str:
        if not isinstance(item, Item):
            raise SerializationError(
                kind=ErrorKind.UNSERIALIZABLE_SHAPE,
                message=f"inner list members must be Items, got {type(item).__name__}",
                value=item,
            )
        return self.serialize_item(item)

    # ------------------------------------------------------------------
    # Items, parameters and keys
    # ------------------------------------------------------------------

    def serialize_item(self, value: Item) -> str:
        return self.serialize_bare_item(value.bare) + self.serialize_parameters(value.params)

    def serialize_parameters(self, params: Parameters) -> str:
        parts: list[str] = []
        for key, value in params:
            parts.append(";" + self.serialize_key(key))
            if value != Boolean(True):
                parts.append("=" + self.serialize_bare_item(value))
        return "".join(parts)

    def serialize_key(self, key: object) -> str:
        if not isinstance(key, str) or not is_valid_key(key):
            raise SerializationError(
                kind=ErrorKind.INVALID_KEY,
                message=f"{key!r} is not a valid key",
                value=key,
            )
        return key

    # ------------------------------------------------------------------
    # Bare items
    # ------------------------------------------------------------------

    def serialize_bare_item(self, value: BareItem) -> str:
        if not isinstance(value, BARE_ITEM_TYPES):
            raise SerializationError(
                kind=ErrorKind.UNSERIALIZABLE_SHAPE,
                message=f"{type(value).__name__} is not a bare item",
                value=value,
            )
        if isinstance(value, Integer):
            return self.serialize_integer(value)
        if isinstance(value, Decimal):
            return self.serialize_decimal(value)
        if isinstance(value, String):
            return self.serialize_string(value)
        if isinstance(value, Token):
            return self.serialize_token(value)
        if isinstance(value, ByteSequence):
            return self.serialize_byte_sequence(value)
        return self.serialize_boolean(value)

    def serialize_integer(self, value: Integer) -> str:
        number = value.value
        if not isinstance(number, int) or isinstance(number, bool):
            raise _wrong_payload(value, "int")
        if not MIN_INTEGER <= number <= MAX_INTEGER:
            raise SerializationError(
                kind=ErrorKind.INTEGER_OUT_OF_RANGE,
                message=f"integer {number} is outside [{MIN_INTEGER}, {MAX_INTEGER}]",
                value=value,
            )
        return str(number)

    def serialize_decimal(self, value: Decimal) -> str:
        """Round half-to-even to three places, then render.

        The output always contains ``.`` and at least one fractional digit;
        trailing fractional zeros are dropped.
        """
        number = value.value
        if not isinstance(number, decimal.Decimal):
            raise _wrong_payload(value, "decimal.Decimal")
        if not number.is_finite() or number.adjusted() >= 12:
            raise SerializationError(
                kind=ErrorKind.DECIMAL_OUT_OF_RANGE,
                message=f"decimal {number} has more than 12 integer digits",
                value=value,
            )
        rounded = number.quantize(_DECIMAL_QUANTUM, rounding=decimal.ROUND_HALF_EVEN)
        if abs(rounded) >= _DECIMAL_INTEGER_LIMIT:
            raise SerializationError(
                kind=ErrorKind.DECIMAL_OUT_OF_RANGE,
                message=f"decimal {number} rounds to more than 12 integer digits",
                value=value,
            )
        integer_part, fractional_part = f"{abs(rounded):f}".split(".")
        sign = "-" if rounded < 0 else ""
        return f"{sign}{integer_part}.{fractional_part.rstrip('0') or '0'}"

    def serialize_string(self, value: String) -> str:
        text = value.value
        if not isinstance(text, str):
            raise _wrong_payload(value, "str")
        for ch in text:
            if not is_sp_or_vchar(ch):
                raise SerializationError(
                    kind=ErrorKind.NON_SERIALIZABLE_CHARACTER,
                    message=f"character {ch!r} cannot appear in a string",
                    value=value,
                )
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'

    def serialize_token(self, value: Token) -> str:
        text = value.value
        if not isinstance(text, str):
            raise _wrong_payload(value, "str")
        if not text.isascii():
            raise SerializationError(
                kind=ErrorKind.NON_SERIALIZABLE_CHARACTER,
                message=f"token {text!r} is not ASCII",
                value=value,
            )
        if not is_valid_token(text):
            raise SerializationError(
                kind=ErrorKind.INVALID_TOKEN,
                message=f"{text!r} is not a valid token",
                value=value,
            )
        return text

    def serialize_byte_sequence(self, value: ByteSequence) -> str:
        data = value.value
        if not isinstance(data, bytes):
            raise _wrong_payload(value, "bytes")
        return ":" + base64.b64encode(data).decode("ascii") + ":"

    def serialize_boolean(self, value: Boolean) -> str:
        flag = value.value
        if not isinstance(flag, bool):
            raise _wrong_payload(value, "bool")
        return "?1" if flag else "?0"


def _wrong_payload(value: BareItem, expected: str) -> SerializationError:
    return SerializationError(
        kind=ErrorKind.UNSERIALIZABLE_SHAPE,
        message=f"{type(value).__name__} must hold a {expected}, "
        f"got {type(value.value).__name__}",
        value=value,
    )


# ---------------------------------------------------------------------------
# Module-level convenience function
# ---------------------------------------------------------------------------


def serialize(value: object) -> bytes | None:
    """Serialize a ``List``, ``Dictionary`` or ``Item`` to a field value.

    Returns ``None`` for an empty List or Dictionary: the field must then
    be omitted entirely rather than sent with an empty value.
    """
    return Serializer().serialize(value)
