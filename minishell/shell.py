"""The command loop: read a line, parse it and run it."""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, List, Optional

from .ast import print_ast
from .executor import exec_ast
from .parser import parse
from .signals import setup_signals
from .state import Shell

if TYPE_CHECKING:
    pass

PROMPT = "minishell> "


def exec_line(shell: Shell, line: str) -> int:
    """Parse and run one command line; return the shell's last status.

    The parsed tree is printed before it runs. A line that fails to parse
    leaves the last status unchanged.
    """
    shell.line = line
    shell.ast = parse(shell, line)
    print_ast(shell.ast, 0)
    if shell.ast is None:
        return shell.last_status
    exec_ast(shell, shell.ast)
    shell.ast = None
    return shell.last_status


def repl(shell: Shell) -> int:
    """Read and run lines until end of input; return the last status."""
    setup_signals()
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            break
        if line:
            exec_line(shell, line)
        shell.line = None
    return shell.last_status


def main(argv: Optional[List[str]] = None) -> int:
    """Run the first argument as a command line, or start the prompt."""
    args = sys.argv[1:] if argv is None else list(argv)
    setup_signals()
    shell = Shell(dict(os.environ))
    if args:
        exec_line(shell, args[0])
        return shell.last_status
    return repl(shell)


if __name__ == "__main__":
    sys.exit(main())