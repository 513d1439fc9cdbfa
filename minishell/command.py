"""Running simple commands: expansion, assignments, builtins and programs."""

from __future__ import annotations

import errno
import os
import subprocess
import sys
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from .ast import Command
from .builtins import is_builtin, run_builtin
from .expand import expand_wildcards, expanded
from .redirs import apply_redirects
from .utils import sort_strings

if TYPE_CHECKING:
    from .state import Shell


def expand_word(shell: "Shell", word: str) -> List[str]:
    """Expand variables and quotes, split on spaces, then expand ``*``.

    A word that expands to nothing is kept as it was written.
    """
    text = expanded(shell.env, word, True, True)
    result: List[str] = []
    for piece in (part for part in text.split(" ") if part):
        result.extend(expand_wildcards(piece) or [piece])
    return result or [word]


def expand_argv(shell: "Shell", words: Optional[Sequence[str]]) -> Optional[List[str]]:
    """Expand every word; the arguments after the first come out sorted."""
    if not words:
        return None
    argv: List[str] = []
    for word in words:
        argv.extend(expand_word(shell, word))
    return argv[:1] + sort_strings(argv[1:])


def find_path(cmd: str, environ: Sequence[str]) -> Optional[str]:
    """Locate ``cmd`` along ``PATH`` in ``environ`` (``NAME=value`` strings).

    Returns None when there is no PATH, and ``cmd`` itself when no
    executable is found.
    """
    path_entry = next((entry for entry in environ if entry.startswith("PATH=")), None)
    if path_entry is None:
        return None
    for directory in (part for part in path_entry[5:].split(":") if part):
        candidate = f"{directory}/{cmd}"
        if os.access(candidate, os.X_OK):
            return candidate
    return cmd


def _environ_list(shell: "Shell") -> List[str]:
    return shell.env.to_list(True) + shell.ctx.to_list(True)


def _environ_dict(entries: Sequence[str]) -> Dict[str, str]:
    env: Dict[str, str] = {}
    for entry in entries:
        name, sep, value = entry.partition("=")
        if sep:
            env[name] = value
    return env


def run_external(shell: "Shell", argv: List[str]) -> int:
    """Run a program with the exported variables and return its exit status."""
    entries = _environ_list(shell)
    path = find_path(argv[0], entries)
    if path is None:
        sys.stderr.write(f"execve: {os.strerror(errno.ENOENT)}\n")
        sys.stderr.flush()
        return 127
    executable = path if "/" in path else f"./{path}"
    sys.stdout.flush()
    sys.stderr.flush()
    try:
        completed = subprocess.run(
            [path, *argv[1:]], executable=executable, env=_environ_dict(entries)
        )
    except OSError as exc:
        sys.stderr.write(f"execve: {exc.strerror}\n")
        sys.stderr.flush()
        return 127
    if completed.returncode < 0:
        return 128 - completed.returncode
    return completed.returncode


def exec_command(shell: "Shell", node: Command) -> int:
    """Run a simple command and return its exit status.

    Assignments before a command go to that command only; without a
    command they set shell variables.
    """
    shell.reset_context()
    argv = expand_argv(shell, node.argv)
    if apply_redirects(shell, node.redirs):
        return 1
    has_command = argv is not None
    target = shell.ctx if has_command else shell.env
    for assignment in node.assignments:
        target.set(assignment, has_command)
    if argv is None:
        return 0
    if is_builtin(argv[0]):
        status = run_builtin(shell, argv)
    else:
        status = run_external(shell, argv)
    shell.last_status = status
    return status