"""Value tree serialization and deserialization to JSON and YAML.

Provides round-trip conversion of Structured Field value trees to and from
a plain dict/list structure that maps naturally to both formats.  This is
an interchange format for tooling (the ``sfv`` CLI dumps parsed fields with
it); the wire format is produced by ``sfv.serializer``.

Decimals are carried as strings so no precision is lost, byte sequences as
standard base64 strings.

Usage
-----
::

    from sfv.ast.serializer import TreeSerializer

    converter = TreeSerializer()
    json_text = converter.to_json(value)
    value2 = converter.from_json(json_text)
    assert value == value2
"""
from __future__ import annotations

import base64
import binascii
import decimal
import json

import yaml

from sfv.ast.nodes import (
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
    Value,
)

# JSON/YAML payload type for each bare item kind
_PAYLOAD_TYPES: dict[str, type] = {
    "Integer": int,
    "Decimal": str,
    "String": str,
    "Token": str,
    "ByteSequence": str,
    "Boolean": bool,
}


class TreeSerializer:
    """Converts between value trees and plain Python dicts.

    The serialized representation uses ``"kind"`` discriminator fields on
    every node so that deserialization is unambiguous.

    Parameters
    ----------
    indent:
        Indentation used by ``to_json``; ``None`` for compact output.
    """

    def __init__(self, indent: int | None = 2) -> None:
        self._indent = indent

    # ------------------------------------------------------------------
    # Serialization (tree → dict)
    # ------------------------------------------------------------------

    def to_dict(self, value: Value) -> dict[str, object]:
        """Serialize a ``List``, ``Dictionary`` or ``Item`` to a JSON-compatible dict."""
        if isinstance(value, List):
            return {"kind": "List", "members": [self._member_to_dict(m) for m in value.members]}
        if isinstance(value, Dictionary):
            return {
                "kind": "Dictionary",
                "members": [
                    {"key": key, "value": self._member_to_dict(member)}
                    for key, member in value.members
                ],
            }
        if isinstance(value, Item):
            return self._item_to_dict(value)
        raise TypeError(f"Unknown value type: {type(value)}")

    def _member_to_dict(self, member: Member) -> dict[str, object]:
        if isinstance(member, InnerList):
            return {
                "kind": "InnerList",
                "items": [self._item_to_dict(i) for i in member.items],
                "params": self._params_to_list(member.params),
            }
        return self._item_to_dict(member)

    def _item_to_dict(self, item: Item) -> dict[str, object]:
        return {
            "kind": "Item",
            "bare": self._bare_to_dict(item.bare),
            "params": self._params_to_list(item.params),
        }

    def _params_to_list(self, params: Parameters) -> list[dict[str, object]]:
        return [{"key": key, "value": self._bare_to_dict(value)} for key, value in params]

    def _bare_to_dict(self, bare: BareItem) -> dict[str, object]:
        if isinstance(bare, Integer):
            return {"kind": "Integer", "value": bare.value}
        if isinstance(bare, Decimal):
            return {"kind": "Decimal", "value": str(bare.value)}
        if isinstance(bare, String):
            return {"kind": "String", "value": bare.value}
        if isinstance(bare, Token):
            return {"kind": "Token", "value": bare.value}
        if isinstance(bare, ByteSequence):
            return {"kind": "ByteSequence", "value": base64.b64encode(bare.value).decode("ascii")}
        if isinstance(bare, Boolean):
            return {"kind": "Boolean", "value": bare.value}
        raise TypeError(f"Unknown bare item type: {type(bare)}")

    # ------------------------------------------------------------------
    # Deserialization (dict → tree)
    # ------------------------------------------------------------------

    def from_dict(self, data: dict[str, object]) -> Value:
        """Deserialize a ``List``, ``Dictionary`` or ``Item`` from a plain dict."""
        kind = data["kind"]
        if kind == "List":
            return List(tuple(self._member_from_dict(m) for m in data.get("members", [])))
        if kind == "Dictionary":
            return Dictionary(
                tuple(
                    (entry["key"], self._member_from_dict(entry["value"]))
                    for entry in data.get("members", [])
                )
            )
        if kind == "Item":
            return self._item_from_dict(data)
        raise ValueError(f"Unknown value kind: {kind!r}")

    def _member_from_dict(self, d: dict[str, object]) -> Member:
        if d["kind"] == "InnerList":
            return InnerList(
                items=tuple(self._item_from_dict(i) for i in d.get("items", [])),
                params=self._params_from_list(d.get("params", [])),
            )
        return self._item_from_dict(d)

    def _item_from_dict(self, d: dict[str, object]) -> Item:
        if d["kind"] != "Item":
            raise ValueError(f"Expected an Item, got kind {d['kind']!r}")
        return Item(
            bare=self._bare_from_dict(d["bare"]),
            params=self._params_from_list(d.get("params", [])),
        )

    def _params_from_list(self, entries: list[dict[str, object]]) -> Parameters:
        return Parameters(
            tuple((entry["key"], self._bare_from_dict(entry["value"])) for entry in entries)
        )

    def _bare_from_dict(self, d: dict[str, object]) -> BareItem:
        """Rebuild a bare item; payloads of the wrong JSON type are rejected, not coerced."""
        kind = d["kind"]
        value = d["value"]
        if kind not in _PAYLOAD_TYPES:
            raise ValueError(f"Unknown bare item kind: {kind!r}")
        expected = _PAYLOAD_TYPES[kind]
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ValueError(
                f"{kind} value must be {expected.__name__}, got {type(value).__name__}: {value!r}"
            )
        if kind == "Integer":
            return Integer(value)
        if kind == "Decimal":
            try:
                return Decimal(decimal.Decimal(value))
            except decimal.InvalidOperation:
                raise ValueError(f"Invalid decimal: {value!r}") from None
        if kind == "String":
            return String(value)
        if kind == "Token":
            return Token(value)
        if kind == "ByteSequence":
            try:
                return ByteSequence(base64.b64decode(value, validate=True))
            except binascii.Error as exc:
                raise ValueError(f"Invalid base64: {value!r}") from exc
        return Boolean(value)

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, value: Value) -> str:
        """Serialize a value tree to a JSON string."""
        return json.dumps(self.to_dict(value), indent=self._indent)

    def from_json(self, text: str) -> Value:
        """Deserialize a value tree from a JSON string."""
        data: dict[str, object] = json.loads(text)
        return self.from_dict(data)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, value: Value) -> str:
        """Serialize a value tree to a YAML string."""
        return yaml.dump(self.to_dict(value), default_flow_style=False, sort_keys=False)

    def from_yaml(self, text: str) -> Value:
        """Deserialize a value tree from a YAML string."""
        data: dict[str, object] = yaml.safe_load(text)
        return self.from_dict(data)
