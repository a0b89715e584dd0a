"""Value model for RFC 8941 Structured Field Values.

Every node is a frozen dataclass so that value trees are immutable and
compare structurally.  Each level of the model is a tagged union of
distinct node classes:

    BareItem  = Integer | Decimal | String | Token | ByteSequence | Boolean
    Member    = Item | InnerList
    Value     = List | Dictionary | Item

Downstream code dispatches with ``isinstance`` checks.  Ordered maps
(``Parameters`` and ``Dictionary``) are stored as tuples of ``(key, value)``
pairs; construction does not deduplicate keys, the parser does.
"""
from __future__ import annotations

import decimal
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class FieldType(Enum):
    """Top-level shape a field value is parsed as."""

    LIST = "list"
    DICTIONARY = "dictionary"
    ITEM = "item"

    @classmethod
    def coerce(cls, value: "FieldType | str") -> "FieldType":
        """Accept either a ``FieldType`` or its string value.

        Raises
        ------
        ValueError
            If ``value`` names no field type.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f'field type must be "list", "dictionary" or "item", got {value!r}'
            ) from None


# ---------------------------------------------------------------------------
# Bare items
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Integer:
    """An sf-integer, valid in ``[-999_999_999_999_999, 999_999_999_999_999]``."""

    value: int


@dataclass(frozen=True, slots=True)
class Decimal:
    """An sf-decimal backed by :class:`decimal.Decimal`.

    ``float`` input is converted through its shortest ``repr`` so that
    ``Decimal(1.0005)`` holds exactly ``1.0005``; ``int`` and ``str`` input
    is converted directly.
    """

    value: decimal.Decimal

    def __post_init__(self) -> None:
        raw = self.value
        if isinstance(raw, float):
            object.__setattr__(self, "value", decimal.Decimal(repr(raw)))
        elif isinstance(raw, (int, str)) and not isinstance(raw, bool):
            object.__setattr__(self, "value", decimal.Decimal(raw))


@dataclass(frozen=True, slots=True)
class String:
    """An sf-string: printable ASCII (SP and VCHAR) only."""

    value: str


@dataclass(frozen=True, slots=True)
class Token:
    """An sf-token, e.g. ``text/html`` or ``*``."""

    value: str


@dataclass(frozen=True, slots=True)
class ByteSequence:
    """An sf-binary: opaque bytes carried as base64 between colons."""

    value: bytes

    def __post_init__(self) -> None:
        if isinstance(self.value, (bytearray, memoryview)):
            object.__setattr__(self, "value", bytes(self.value))


@dataclass(frozen=True, slots=True)
class Boolean:
    """An sf-boolean, serialized as ``?1`` or ``?0``."""

    value: bool


BareItem = Union[Integer, Decimal, String, Token, ByteSequence, Boolean]

BARE_ITEM_TYPES: tuple[type, ...] = (Integer, Decimal, String, Token, ByteSequence, Boolean)

# ---------------------------------------------------------------------------
# Ordered pair helpers
# ---------------------------------------------------------------------------

_MISSING = object()


def _last_value(pairs: tuple[tuple[str, object], ...], key: str) -> object:
    """Return the value of the last pair named ``key``, or ``_MISSING``."""
    for pair_key, pair_value in reversed(pairs):
        if pair_key == key:
            return pair_value
    return _MISSING


def _unique_keys(pairs: tuple[tuple[str, object], ...]) -> list[str]:
    return list(dict.fromkeys(key for key, _ in pairs))


# ---------------------------------------------------------------------------
# Parameters and items
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Parameters:
    """Ordered ``(key, bare item)`` pairs attached to an item or inner list.

    Parameters
    ----------
    pairs:
        The parameters in serialization order.  Any iterable of pairs is
        accepted and stored as a tuple.
    """

    pairs: tuple[tuple[str, BareItem], ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.pairs, tuple):
            object.__setattr__(self, "pairs", tuple(tuple(p) for p in self.pairs))

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[tuple[str, BareItem]]:
        return iter(self.pairs)

    def __contains__(self, key: object) -> bool:
        return any(pair_key == key for pair_key, _ in self.pairs)

    def __getitem__(self, key: str) -> BareItem:
        value = _last_value(self.pairs, key)
        if value is _MISSING:
            raise KeyError(key)
        return value  # type: ignore[return-value]

    def get(self, key: str, default: BareItem | None = None) -> BareItem | None:
        """Return the value for ``key`` (last one wins), or ``default``."""
        value = _last_value(self.pairs, key)
        return default if value is _MISSING else value  # type: ignore[return-value]

    def keys(self) -> list[str]:
        """Return the distinct keys in first-seen order."""
        return _unique_keys(self.pairs)


@dataclass(frozen=True, slots=True)
class Item:
    """A bare item with its parameters."""

    bare: BareItem
    params: Parameters = field(default_factory=Parameters)


@dataclass(frozen=True, slots=True)
class InnerList:
    """A parenthesized list of items; ``params`` belong to the list itself."""

    items: tuple[Item, ...] = ()
    params: Parameters = field(default_factory=Parameters)

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)


Member = Union[Item, InnerList]

# ---------------------------------------------------------------------------
# Top-level containers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class List:
    """An sf-list: ordered items and inner lists."""

    members: tuple[Member, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.members, tuple):
            object.__setattr__(self, "members", tuple(self.members))

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[Member]:
        return iter(self.members)

    def __getitem__(self, index: int) -> Member:
        return self.members[index]


@dataclass(frozen=True, slots=True)
class Dictionary:
    """An sf-dictionary: ordered ``(key, member)`` pairs.

    A member whose value is Boolean true is represented as
    ``Item(Boolean(True), params)``.
    """

    members: tuple[tuple[str, Member], ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.members, tuple):
            object.__setattr__(self, "members", tuple(tuple(m) for m in self.members))

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self) -> Iterator[tuple[str, Member]]:
        return iter(self.members)

    def __contains__(self, key: object) -> bool:
        return any(member_key == key for member_key, _ in self.members)

    def __getitem__(self, key: str) -> Member:
        value = _last_value(self.members, key)
        if value is _MISSING:
            raise KeyError(key)
        return value  # type: ignore[return-value]

    def get(self, key: str, default: Member | None = None) -> Member | None:
        """Return the member for ``key`` (last one wins), or ``default``."""
        value = _last_value(self.members, key)
        return default if value is _MISSING else value  # type: ignore[return-value]

    def keys(self) -> list[str]:
        """Return the distinct keys in first-seen order."""
        return _unique_keys(self.members)


Value = Union[List, Dictionary, Item]
