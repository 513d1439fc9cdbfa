"""Applying input and output redirections to the shell's standard streams."""

from __future__ import annotations

import os
import sys
import tempfile
from typing import TYPE_CHECKING, Iterable

from .ast import Redirect
from .lexer import TokenType

if TYPE_CHECKING:
    from .state import Shell

STDIN_FILENO = 0
STDOUT_FILENO = 1

_FILE_MODE = 0o644

_OPEN_FLAGS = {
    TokenType.REDIR_OUT: os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    TokenType.REDIR_IN: os.O_RDONLY,
    TokenType.REDIR_APPEND: os.O_WRONLY | os.O_CREAT | os.O_APPEND,
}


def redirect_fd(kind: TokenType) -> int:
    """The descriptor a redirection of ``kind`` replaces."""
    if kind in (TokenType.REDIR_OUT, TokenType.REDIR_APPEND):
        return STDOUT_FILENO
    return STDIN_FILENO


def open_redirect(kind: TokenType, filename: str) -> int:
    """Open ``filename`` as a redirection of ``kind`` and return the descriptor.

    Raises OSError when the file cannot be opened, and ValueError when
    ``kind`` is not a file redirection.
    """
    flags = _OPEN_FLAGS.get(kind)
    if flags is None:
        raise ValueError(f"not a file redirection: {kind}")
    return os.open(filename, flags, _FILE_MODE)


def _heredoc_fd(body: str) -> int:
    """A readable descriptor positioned at the start of ``body``."""
    with tempfile.TemporaryFile() as tmp:
        tmp.write(body.encode())
        tmp.flush()
        tmp.seek(0)
        return os.dup(tmp.fileno())


def _flush_streams() -> None:
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            pass


def apply_redirects(shell: "Shell", redirects: Iterable[Redirect]) -> int:
    """Apply redirections in order; return 0 on success or 1 after reporting an error."""
    for redir in redirects:
        if redir.kind is TokenType.HEREDOC:
            if redir.heredoc is None:
                continue
            fd = _heredoc_fd(redir.heredoc)
        else:
            try:
                fd = open_redirect(redir.kind, redir.file_name or "")
            except OSError as exc:
                sys.stderr.write(f"minishell: {redir.file_name}: {exc.strerror}\n")
                sys.stderr.flush()
                return 1
        _flush_streams()
        try:
            os.dup2(fd, redirect_fd(redir.kind))
        except OSError as exc:
            sys.stderr.write(f"minishell: dup2: {exc.strerror}\n")
            sys.stderr.flush()
            return 1
        finally:
            os.close(fd)
    return 0