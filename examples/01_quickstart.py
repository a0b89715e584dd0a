#!/usr/bin/env python3
"""Example: Quickstart for sfv-codec

Minimal working example: parse structured header fields, inspect the
value tree, build a new value, and serialize it back.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install sfv-codec
"""
from __future__ import annotations

import sfv

HEADERS = {
    "Accept": "text/html;q=1.0, application/json;q=0.9, */*;q=0.1",
    "Priority": "u=2, i",
    "Example-Bad": "a, b,",
}


def main() -> None:
    print(f"sfv-codec version: {sfv.__version__}")

    # Step 1: Parse a list field
    accept = sfv.get_field(HEADERS, "accept", "list")
    assert isinstance(accept, sfv.List)
    for member in accept:
        assert isinstance(member, sfv.Item)
        print(f"  {member.bare.value:<20} q={member.params['q'].value}")

    # Step 2: Parse a dictionary field
    priority = sfv.get_field(HEADERS, "priority", "dictionary")
    assert isinstance(priority, sfv.Dictionary)
    print(f"Priority keys: {priority.keys()}")

    # Step 3: Invalid fields are ignored
    print(f"Example-Bad parsed as: {sfv.get_field(HEADERS, 'example-bad', 'list')}")

    # Step 4: Build a value and serialize it
    value = sfv.Dictionary(
        (
            ("sig", sfv.Item(sfv.ByteSequence(b"\x01\x02\x03"))),
            ("ratio", sfv.Item(sfv.Decimal("0.3333"))),
            ("tags", sfv.InnerList((sfv.Item(sfv.Token("a")), sfv.Item(sfv.Token("b"))))),
        )
    )
    print(f"Serialized: {sfv.serialize(value)!r}")


if __name__ == "__main__":
    main()
