"""Shell variables: an ordered set of names with optional values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

from .utils import is_name_char


def key_len(text: str) -> int:
    """Length of the leading run of name characters in ``text``."""
    length = 0
    for ch in text:
        if not is_name_char(ch):
            break
        length += 1
    return length


def name_from_assign(assign: str) -> str:
    """The variable name part of ``NAME=value`` (the whole text if no ``=``)."""
    if "=" not in assign:
        return assign
    return assign[: key_len(assign)]


def value_from_assign(assign: str) -> Optional[str]:
    """The value part of ``NAME=value``, or None if there is no ``=``."""
    if "=" not in assign:
        return None
    return assign[key_len(assign) + 1 :]


@dataclass
class Variable:
    """One shell variable."""

    name: str
    value: Optional[str]
    export: bool
    length: int

    @classmethod
    def from_assignment(cls, assign: str, export: bool) -> "Variable":
        return cls(
            name=name_from_assign(assign),
            value=value_from_assign(assign),
            export=export,
            length=key_len(assign),
        )

    def matches(self, name: str) -> bool:
        """True if the name prefix of ``name`` refers to this variable."""
        klen = key_len(name)
        return self.length == klen and self.name[:klen] == name[:klen]


class Environment:
    """An insertion-ordered collection of shell variables."""

    def __init__(self) -> None:
        self._vars: List[Variable] = []

    def get(self, name: Optional[str]) -> Optional[Variable]:
        """Find the variable named by the leading name characters of ``name``."""
        if name is None:
            return None
        return next((var for var in self._vars if var.matches(name)), None)

    def get_value(self, name: Optional[str]) -> Optional[str]:
        var = self.get(name)
        return var.value if var is not None else None

    def set(self, assignment: str, export: bool) -> Variable:
        """Create or update a variable from ``NAME[=value]``.

        An existing variable keeps its export flag; its value changes only
        when the assignment carries one.
        """
        var = self.get(assignment)
        if var is not None:
            klen = key_len(assignment)
            if assignment[klen : klen + 1] == "=":
                var.value = assignment[klen + 1 :]
            return var
        var = Variable.from_assignment(assignment, export)
        self._vars.append(var)
        return var

    def append(self, assignment: str, export: bool) -> Variable:
        """Handle ``NAME+=value``: extend an existing value or create one."""
        var = self.get(assignment)
        if var is None:
            return self.set(assignment, export)
        _, sep, tail = assignment.partition("=")
        if sep:
            var.value = (var.value or "") + tail
        return var

    def unset(self, name: str) -> bool:
        """Remove a variable; return whether one was removed."""
        var = self.get(name)
        if var is None:
            return False
        self._vars.remove(var)
        return True

    def to_list(self, export: bool) -> List[str]:
        """Render variables as ``NAME=value`` (or ``NAME`` when unset).

        With ``export`` true only exported variables are included.
        """
        return [
            var.name if var.value is None else f"{var.name}={var.value}"
            for var in self._vars
            if var.export or not export
        ]

    def clear(self) -> None:
        self._vars.clear()

    def __len__(self) -> int:
        return len(self._vars)

    def __iter__(self) -> Iterator[Variable]:
        return iter(list(self._vars))