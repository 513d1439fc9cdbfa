"""Variable and quote expansion, and ``*`` pathname expansion."""

from __future__ import annotations

import os
from enum import Enum
from typing import List, Optional

from .envp import Environment, key_len
from .utils import is_name_char

_C_SPACE = frozenset(" \t\n\v\f\r")


class _State(Enum):
    DEFAULT = 0
    IN_DQ = 1
    IN_SQ = 2


def _expand_variable(
    env: Optional[Environment], text: str, start: int, out: List[str]
) -> int:
    """Expand the variable reference starting after ``$``; return the new index."""
    if start >= len(text):
        return start
    if not is_name_char(text[start]):
        end = start
        while end < len(text) and text[end] not in _C_SPACE:
            end += 1
        out.append(text[start:end])
        return end
    end = start + key_len(text[start:])
    if env is not None:
        value = env.get_value(text[start:end])
        if value is not None:
            out.append(value)
    return end


def expanded(
    env: Optional[Environment], text: str, variables: bool, quotes: bool
) -> str:
    """Expand ``$NAME`` references (if ``variables``) and strip quotes (if ``quotes``).

    Single quotes suppress variable expansion; double quotes do not.
    Unknown variables expand to nothing.
    """
    out: List[str] = []
    state = _State.DEFAULT
    i = 0
    while i < len(text):
        ch = text[i]
        if state is _State.DEFAULT:
            if quotes and ch == "'":
                state = _State.IN_SQ
                i += 1
            elif quotes and ch == '"':
                state = _State.IN_DQ
                i += 1
            elif variables and ch == "$":
                i = _expand_variable(env, text, i + 1, out)
            else:
                out.append(ch)
                i += 1
        elif state is _State.IN_DQ:
            if variables and ch == "$":
                i = _expand_variable(env, text, i + 1, out)
            elif ch == '"':
                state = _State.DEFAULT
                i += 1
            else:
                out.append(ch)
                i += 1
        else:
            if ch == "'":
                state = _State.DEFAULT
            else:
                out.append(ch)
            i += 1
    return "".join(out)


def match_wildcard(pattern: str, name: str) -> bool:
    """Match ``name`` against ``pattern`` where ``*`` matches any run."""
    p = s = 0
    star = -1
    mark = 0
    while s < len(name):
        if p < len(pattern) and pattern[p] == "*":
            star = p
            p += 1
            mark = s
        elif p < len(pattern) and pattern[p] == name[s]:
            p += 1
            s += 1
        elif star >= 0:
            p = star + 1
            mark += 1
            s = mark
        else:
            return False
    while p < len(pattern) and pattern[p] == "*":
        p += 1
    return p == len(pattern)


def _entries(directory: str) -> List[str]:
    try:
        return [".", ".."] + os.listdir(directory)
    except OSError:
        return []


def get_matches(cwd: str, parts: List[str]) -> List[str]:
    """Paths under ``cwd`` ("" for the current directory) matching ``parts``.

    Each element of ``parts`` is a pattern for one path component. Hidden
    entries only match patterns that start with a dot.
    """
    if not parts:
        return [cwd] if cwd and os.path.exists(cwd) else []
    prefix = f"{cwd}/" if cwd else ""
    pattern, rest = parts[0], parts[1:]
    matches: List[str] = []
    for name in _entries(cwd or "."):
        if name.startswith(".") and not pattern.startswith("."):
            continue
        if not match_wildcard(pattern, name):
            continue
        candidate = prefix + name
        if os.path.isdir(candidate):
            matches.extend(get_matches(candidate, rest))
        elif not rest and os.path.lexists(candidate):
            matches.append(candidate)
    return matches


def expand_wildcards(word: Optional[str]) -> Optional[List[str]]:
    """Expand ``*`` in ``word`` against the file system.

    A word without ``*``, or one that matches nothing, expands to itself.
    """
    if word is None:
        return None
    if "*" not in word:
        return [word]
    parts = [part for part in word.split("/") if part]
    if len(parts) > 1:
        matches = get_matches(parts[0], parts[1:])
    else:
        matches = get_matches("", parts)
    return matches or [word]