"""Interpreter state shared by the parser and the executor."""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Union

from .ast import Node
from .envp import Environment

EnvironSource = Union[Mapping[str, str], Iterable[str], None]


class Shell:
    """Holds variables, the per-command context and the last exit status."""

    def __init__(self, environ: EnvironSource = None) -> None:
        self.env = Environment()
        self.ctx = Environment()
        self.line: Optional[str] = None
        self.ast: Optional[Node] = None
        self.last_status = 0
        if environ is None:
            return
        if isinstance(environ, Mapping):
            entries: Iterable[str] = (f"{k}={v}" for k, v in environ.items())
        else:
            entries = environ
        for entry in entries:
            self.env.append(entry, True)

    def reset_context(self) -> None:
        """Forget the variables assigned for the current command only."""
        self.ctx.clear()