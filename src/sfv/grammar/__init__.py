"""Structured Field Values grammar: character classes and ABNF reference."""
from __future__ import annotations

from sfv.grammar.abnf import GRAMMAR_SECTIONS, full_grammar
from sfv.grammar.charclass import (
    is_alpha,
    is_base64_char,
    is_digit,
    is_key_char,
    is_key_start,
    is_lcalpha,
    is_sp_or_vchar,
    is_tchar,
    is_token_char,
    is_token_start,
    is_valid_key,
    is_valid_token,
    is_vchar,
)

__all__ = [
    "GRAMMAR_SECTIONS",
    "full_grammar",
    "is_alpha",
    "is_base64_char",
    "is_digit",
    "is_key_char",
    "is_key_start",
    "is_lcalpha",
    "is_sp_or_vchar",
    "is_tchar",
    "is_token_char",
    "is_token_start",
    "is_valid_key",
    "is_valid_token",
    "is_vchar",
]
