"""sfv-codec: parser and serializer for RFC 8941 Structured Field Values.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import sfv

    # Parse a field value into a value tree
    accept = sfv.parse(b"text/html;q=1.0, text/plain;q=0.5", "list")
    accept[0].bare                     # Token(value='text/html')
    accept[0].params["q"]              # Decimal(value=Decimal('1.0'))

    # Build a value tree and serialize it
    value = sfv.Dictionary((("a", sfv.Item(sfv.Integer(1))),))
    sfv.serialize(value)               # b'a=1'

    # Empty top-level containers are omitted, not sent as ""
    sfv.serialize(sfv.List())          # None

    sfv.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING

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
from sfv.parser.errors import ErrorKind, ParseError, SerializationError, StructuredFieldError

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping


def parse(data: bytes | bytearray | memoryview | str, field_type: FieldType | str) -> Value:
    """Parse a field value into a ``List``, ``Dictionary`` or ``Item``.

    Parameters
    ----------
    data:
        The raw field value; must be pure ASCII.
    field_type:
        ``"list"``, ``"dictionary"`` or ``"item"`` (or a ``FieldType``).

    Returns
    -------
    List | Dictionary | Item
        The parsed value tree.

    Raises
    ------
    sfv.ParseError
        If the value does not parse.  The field must then be ignored.
    ValueError
        If ``field_type`` is unknown.
    """
    from sfv.parser.parser import parse as _parse

    return _parse(data, field_type)


def serialize(value: Value) -> bytes | None:
    """Serialize a ``List``, ``Dictionary`` or ``Item`` to ASCII bytes.

    Returns
    -------
    bytes | None
        The canonical field value, or ``None`` for an empty List or
        Dictionary, meaning the field should be omitted.

    Raises
    ------
    sfv.SerializationError
        If any part of ``value`` cannot be serialized.
    """
    from sfv.serializer.serializer import serialize as _serialize

    return _serialize(value)


def get_field(headers: "Mapping[str, str]", name: str, field_type: FieldType | str) -> Value | None:
    """Parse field ``name`` from ``headers``; ``None`` if absent or invalid."""
    from sfv.fields import get_structured_field

    return get_structured_field(headers, name, field_type)


def set_field(headers: "MutableMapping[str, str]", name: str, value: Value) -> bool:
    """Serialize ``value`` into ``headers[name]``; empty containers remove the field."""
    from sfv.fields import set_structured_field

    return set_structured_field(headers, name, value)


__all__ = [
    "__version__",
    "parse",
    "serialize",
    "get_field",
    "set_field",
    # Model
    "FieldType",
    "BareItem",
    "Integer",
    "Decimal",
    "String",
    "Token",
    "ByteSequence",
    "Boolean",
    "Parameters",
    "Item",
    "InnerList",
    "Member",
    "List",
    "Dictionary",
    "Value",
    # Errors
    "ErrorKind",
    "StructuredFieldError",
    "ParseError",
    "SerializationError",
]
