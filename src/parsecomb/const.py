"""
Character classes used by the primitive parsers.
"""

from __future__ import annotations
from typing import Final

WHITESPACES: Final[frozenset[str]] = frozenset({" ", "\t", "\n", "\r", "\f"})
DECIMAL: Final[frozenset[str]] = frozenset("0123456789")
HEXADECIMAL: Final[frozenset[str]] = DECIMAL | frozenset("abcdefABCDEF")
ALPHABETIC: Final[frozenset[str]] = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")

ESCAPES: Final[dict[str, str]] = {
    'b': '\b',
    'f': '\f',
    'n': '\n',
    'r': '\r',
    't': '\t',
}
"""Escape sequences understood by `quoted_string`, keyed by the character after the escape character."""
