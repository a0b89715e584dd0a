"""Character classes used by the Structured Field Values grammar.

The core rules come from RFC 5234 (ALPHA, DIGIT, SP, HTAB, VCHAR) and
RFC 7230 (``tchar``, ``OWS``); RFC 8941 adds ``lcalpha`` and the key and
token alphabets on top of them.

Every predicate takes a single character and returns ``False`` for the
empty string, so callers can pass the result of a cursor peek at end of
input without a separate bounds check.
"""
from __future__ import annotations

import string
from typing import Final

# ---------------------------------------------------------------------------
# RFC 5234 core rules
# ---------------------------------------------------------------------------

ALPHA: Final[frozenset[str]] = frozenset(string.ascii_letters)
DIGIT: Final[frozenset[str]] = frozenset(string.digits)
SP: Final[str] = " "
HTAB: Final[str] = "\t"

# ---------------------------------------------------------------------------
# RFC 7230 / RFC 8941 classes
# ---------------------------------------------------------------------------

LCALPHA: Final[frozenset[str]] = frozenset(string.ascii_lowercase)
OWS: Final[str] = SP + HTAB

TCHAR: Final[frozenset[str]] = ALPHA | DIGIT | frozenset("!#$%&'*+-.^_`|~")

KEY_START: Final[frozenset[str]] = LCALPHA | frozenset("*")
KEY_CHAR: Final[frozenset[str]] = LCALPHA | DIGIT | frozenset("_-.*")

TOKEN_START: Final[frozenset[str]] = ALPHA | frozenset("*")
TOKEN_CHAR: Final[frozenset[str]] = TCHAR | frozenset(":/")

BASE64_CHAR: Final[frozenset[str]] = ALPHA | DIGIT | frozenset("+/=")


def is_alpha(ch: str) -> bool:
    """Return True for ``A-Z`` and ``a-z``."""
    return ch in ALPHA


def is_digit(ch: str) -> bool:
    """Return True for ``0-9``."""
    return ch in DIGIT


def is_lcalpha(ch: str) -> bool:
    """Return True for ``a-z``."""
    return ch in LCALPHA


def is_vchar(ch: str) -> bool:
    """Return True for visible ASCII characters (``%x21-7E``)."""
    return len(ch) == 1 and 0x21 <= ord(ch) <= 0x7E


def is_sp_or_vchar(ch: str) -> bool:
    """Return True for characters allowed unescaped inside an sf-string."""
    return len(ch) == 1 and 0x20 <= ord(ch) <= 0x7E


def is_tchar(ch: str) -> bool:
    """Return True for RFC 7230 token characters."""
    return ch in TCHAR


def is_key_start(ch: str) -> bool:
    return ch in KEY_START


def is_key_char(ch: str) -> bool:
    return ch in KEY_CHAR


def is_token_start(ch: str) -> bool:
    return ch in TOKEN_START


def is_token_char(ch: str) -> bool:
    return ch in TOKEN_CHAR


def is_base64_char(ch: str) -> bool:
    return ch in BASE64_CHAR


def is_valid_key(text: str) -> bool:
    """Return True if ``text`` matches the sf-key production."""
    return bool(text) and is_key_start(text[0]) and all(is_key_char(c) for c in text[1:])


def is_valid_token(text: str) -> bool:
    """Return True if ``text`` matches the sf-token production."""
    return bool(text) and is_token_start(text[0]) and all(is_token_char(c) for c in text[1:])
