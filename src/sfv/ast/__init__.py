"""Structured Field Values model.

Exports all node types and the serializer for converting value trees
to and from JSON/YAML.
"""
from __future__ import annotations

from sfv.ast.nodes import (
    BARE_ITEM_TYPES,
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
from sfv.ast.serializer import TreeSerializer

__all__ = [
    # Bare items
    "BareItem",
    "BARE_ITEM_TYPES",
    "Integer",
    "Decimal",
    "String",
    "Token",
    "ByteSequence",
    "Boolean",
    # Containers
    "Parameters",
    "Item",
    "InnerList",
    "Member",
    "List",
    "Dictionary",
    "Value",
    "FieldType",
    # Serializer
    "TreeSerializer",
]
