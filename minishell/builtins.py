"""Commands the shell runs itself."""

from __future__ import annotations

import re
import sys
from typing import TYPE_CHECKING, List

from .envp import Environment, key_len
from .utils import is_name_char, sort_strings

if TYPE_CHECKING:
    from .state import Shell

BUILTINS = frozenset({"export", "unset", "cd", "echo", "env", "pwd", "exit"})

_ATOI = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]*)")


def is_builtin(word: str | None) -> bool:
    """True if ``word`` names a builtin."""
    return word is not None and word in BUILTINS


def is_append(text: str | None) -> bool:
    """True if ``text`` has the form ``NAME+=value``."""
    if not text:
        return False
    for i in range(1, len(text)):
        ch = text[i]
        if ch == "+" and text[i + 1 : i + 2] == "=" and is_name_char(text[i - 1]):
            return True
        if not is_name_char(ch) and ch != "+":
            break
    return False


def format_exported(env: Environment) -> str:
    """List exported variables, sorted, as ``declare -x`` lines."""
    lines: List[str] = []
    for entry in sort_strings(env.to_list(True)):
        if "=" in entry:
            name = entry[: key_len(entry)]
            value = entry.partition("=")[2]
            lines.append(f'declare -x {name}="{value}"\n')
        else:
            lines.append(f"declare -x {entry}\n")
    return "".join(lines)


def export(shell: "Shell", argv: List[str]) -> int:
    """Set and export variables, or list the exported ones."""
    if len(argv) < 2:
        sys.stdout.write(format_exported(shell.env))
        sys.stdout.flush()
        return 0
    for arg in argv[1:]:
        if is_append(arg):
            shell.env.append(arg, True)
        else:
            shell.env.set(arg, True)
    return 0


def unset(shell: "Shell", argv: List[str]) -> int:
    """Remove the named variables."""
    for name in argv[1:]:
        shell.env.unset(name)
    return 0


def _atoi(text: str) -> int:
    digits = _ATOI.match(text).group(1)
    if digits in ("", "+", "-"):
        return 0
    return int(digits)


def exit_builtin(shell: "Shell", argv: List[str]) -> int:
    """Leave the shell by raising SystemExit with the requested code."""
    code = 0
    if len(argv) == 2:
        code = _atoi(argv[1])
    elif len(argv) > 2:
        sys.stderr.write("minishell: exit: too many arguments\n")
        sys.stderr.flush()
    raise SystemExit(code)


def run_builtin(shell: "Shell", argv: List[str]) -> int:
    """Run the builtin named by ``argv[0]``; unsupported ones fail with 1."""
    name = argv[0] if argv else None
    if name == "export":
        return export(shell, argv)
    if name == "unset":
        return unset(shell, argv)
    if name == "exit":
        return exit_builtin(shell, argv)
    return 1