"""Structured Field Values parser module.

Exports the ``Parser`` class, the ``parse`` convenience function, and
the codec error types.
"""
from __future__ import annotations

from sfv.parser.errors import ErrorKind, ParseError, SerializationError, StructuredFieldError
from sfv.parser.parser import Parser, parse

__all__ = [
    "Parser",
    "parse",
    "ErrorKind",
    "ParseError",
    "SerializationError",
    "StructuredFieldError",
]
