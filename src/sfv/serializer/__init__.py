"""Structured Field Values serializer module.

Exports the ``Serializer`` class and the ``serialize`` convenience
function.
"""
from __future__ import annotations

from sfv.serializer.serializer import MAX_INTEGER, MIN_INTEGER, Serializer, serialize

__all__ = ["Serializer", "serialize", "MAX_INTEGER", "MIN_INTEGER"]
