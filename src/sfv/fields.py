"""Read and write structured fields on a plain header mapping.

These helpers are the seam between the codec and whatever header container
the caller uses.  Any ``Mapping[str, str]`` works for reading and any
``MutableMapping[str, str]`` for writing; names are matched ASCII
case-insensitively.  Multiple field lines are not combined here: the
mapping is expected to hold one value per name.

Example
-------
::

    from sfv.fields import get_structured_field, set_structured_field

    headers = {"Accept-CH": "Sec-CH-UA-Model, Sec-CH-UA-Platform"}
    hints = get_structured_field(headers, "accept-ch", "list")
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping

from sfv.ast.nodes import FieldType, Value
from sfv.parser.errors import ParseError
from sfv.parser.parser import parse
from sfv.serializer.serializer import serialize

logger = logging.getLogger(__name__)


def _find_name(headers: Mapping[str, str], name: str) -> str | None:
    """Return the key in ``headers`` matching ``name`` case-insensitively."""
    if name in headers:
        return name
    wanted = name.lower()
    for candidate in headers:
        if candidate.lower() == wanted:
            return candidate
    return None


def get_structured_field(
    headers: Mapping[str, str], name: str, field_type: FieldType | str
) -> Value | None:
    """Return the parsed value of field ``name``, or ``None``.

    ``None`` is returned both when the field is absent and when its value
    fails to parse: a structured field that does not parse must be treated
    as if it were not present.

    Raises
    ------
    ValueError
        If ``field_type`` is not a known field type.
    """
    field_type = FieldType.coerce(field_type)
    actual_name = _find_name(headers, name)
    if actual_name is None:
        return None
    try:
        return parse(headers[actual_name], field_type)
    except ParseError as exc:
        logger.debug("Ignoring unparseable %s field %r: %s", field_type.value, actual_name, exc)
        return None


def set_structured_field(headers: MutableMapping[str, str], name: str, value: Value) -> bool:
    """Serialize ``value`` into field ``name`` of ``headers``.

    An existing field with the same name (in any case) is replaced.  Empty
    Lists and Dictionaries remove the field instead of writing an empty
    value.

    Returns
    -------
    bool
        ``True`` if the field was written, ``False`` if it was omitted.

    Raises
    ------
    SerializationError
        If ``value`` cannot be serialized; ``headers`` is left unchanged.
    """
    output = serialize(value)
    existing = _find_name(headers, name)
    if output is None:
        if existing is not None:
            logger.debug("Removing field %r: value is an empty container", existing)
            del headers[existing]
        return False
    if existing is not None and existing != name:
        del headers[existing]
    headers[name] = output.decode("ascii")
    return True
