"""Small string helpers shared across the shell."""

from __future__ import annotations

import string
from functools import cmp_to_key
from typing import Iterable, List, Optional

_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_")


def count_words(text: str, sep: str) -> int:
    """Count the runs of characters in ``text`` that are not ``sep``."""
    return sum(1 for part in text.split(sep) if part)


def is_name_char(ch: str) -> bool:
    """Return True if ``ch`` may appear in a variable name."""
    return len(ch) == 1 and ch in _NAME_CHARS


def compare(s1: Optional[str], s2: Optional[str]) -> int:
    """Compare two strings by code point; ``None`` sorts before any string.

    The result is negative, zero or positive and, like the classic C
    comparison, is the difference of the first differing characters.
    """
    if s1 is None and s2 is None:
        return 0
    if s1 is None:
        return -1
    if s2 is None:
        return 1
    for a, b in zip(s1, s2):
        if a != b:
            return ord(a) - ord(b)
    if len(s1) == len(s2):
        return 0
    if len(s1) > len(s2):
        return ord(s1[len(s2)])
    return -ord(s2[len(s1)])


def sort_strings(items: Iterable[Optional[str]]) -> List[Optional[str]]:
    """Return the strings in a new list, stably sorted with :func:`compare`."""
    return sorted(items, key=cmp_to_key(compare))