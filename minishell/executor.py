"""Walking the syntax tree: lists, pipelines, groupings and commands."""

from __future__ import annotations

import os
import signal
import sys
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from .ast import AndList, Command, CommandLine, Grouping, Node, OrList, Pipeline
from .builtins import is_builtin
from .command import exec_command
from .redirs import STDIN_FILENO, STDOUT_FILENO, apply_redirects
from .signals import ignore_sigint

if TYPE_CHECKING:
    from .state import Shell

_SavedFds = Tuple[Optional[int], Optional[int]]


def _flush_streams() -> None:
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            pass


def _report(what: str, exc: OSError) -> None:
    sys.stderr.write(f"{what}: {exc.strerror}\n")
    sys.stderr.flush()


def _dup_or_none(fd: int) -> Optional[int]:
    try:
        return os.dup(fd)
    except OSError:
        return None


def _save_fds() -> _SavedFds:
    return _dup_or_none(STDIN_FILENO), _dup_or_none(STDOUT_FILENO)


def _restore_fds(saved: _SavedFds) -> None:
    _flush_streams()
    for copy, target in zip(saved, (STDIN_FILENO, STDOUT_FILENO)):
        if copy is None:
            continue
        try:
            os.dup2(copy, target)
        finally:
            os.close(copy)


def exec_node(shell: "Shell", node: Optional[Node]) -> int:
    """Run any node and return its exit status (1 for a missing node)."""
    if node is None:
        return 1
    if isinstance(node, CommandLine):
        return exec_node(shell, node.body)
    if isinstance(node, Pipeline):
        return exec_pipeline(shell, node)
    if isinstance(node, Command):
        return exec_command(shell, node)
    if isinstance(node, Grouping):
        return exec_grouping(shell, node)
    if isinstance(node, (AndList, OrList)):
        return exec_logical(shell, node)
    return 0


def exec_ast(shell: "Shell", node: Optional[Node]) -> int:
    """Run a whole tree and record its status as the shell's last status."""
    status = exec_node(shell, node)
    shell.last_status = status
    return status


def exec_logical(shell: "Shell", node: Node) -> int:
    """Run ``&&`` and ``||`` lists with short-circuit evaluation."""
    if not isinstance(node, (AndList, OrList)):
        return 1
    left_status = exec_node(shell, node.left)
    if isinstance(node, AndList):
        return exec_node(shell, node.right) if left_status == 0 else left_status
    return exec_node(shell, node.right) if left_status != 0 else left_status


def exec_grouping(shell: "Shell", node: Grouping) -> int:
    """Apply the grouping's redirections, then run its body."""
    if apply_redirects(shell, node.redirs):
        return 1
    return exec_node(shell, node.body)


def exec_core(shell: "Shell", core: Optional[Node], in_fork: bool) -> int:
    """Run a command or grouping.

    Outside a child process the standard input and output are saved first
    and put back afterwards, so redirections do not outlive the core.
    """
    if not isinstance(core, (Command, Grouping)):
        return 1
    saved: _SavedFds = (None, None) if in_fork else _save_fds()
    try:
        if isinstance(core, Command):
            status = exec_command(shell, core)
        else:
            status = exec_grouping(shell, core)
    finally:
        if not in_fork:
            _restore_fds(saved)
    shell.last_status = status
    return status


def _is_core_builtin(core: Node) -> bool:
    return isinstance(core, Command) and bool(core.argv) and is_builtin(core.argv[0])


def _run_child(
    shell: "Shell",
    core: Node,
    prev_read: Optional[int],
    next_read: Optional[int],
    next_write: Optional[int],
) -> None:
    """Body of a forked pipeline member; never returns."""
    status = 1
    try:
        if prev_read is not None:
            os.dup2(prev_read, STDIN_FILENO)
            os.close(prev_read)
        if next_write is not None:
            if next_read is not None:
                os.close(next_read)
            os.dup2(next_write, STDOUT_FILENO)
            os.close(next_write)
        status = exec_core(shell, core, True)
    except SystemExit as exc:
        code = exc.code
        status = code if isinstance(code, int) else (0 if code is None else 1)
    except BaseException:
        status = 1
    finally:
        _flush_streams()
        os._exit(status & 0xFF)


def exec_pipeline(shell: "Shell", pipeline: Pipeline) -> int:
    """Run the cores of a pipeline, each in its own child process.

    A pipeline made of a single builtin command runs in the shell itself.
    The status is that of the last core.
    """
    cores: List[Node] = list(pipeline.cores)
    if not cores:
        return 0
    if len(cores) == 1 and _is_core_builtin(cores[0]):
        return exec_core(shell, cores[0], False)
    pids: List[int] = []
    prev_read: Optional[int] = None
    for index, core in enumerate(cores):
        has_next = index < len(cores) - 1
        next_read: Optional[int] = None
        next_write: Optional[int] = None
        if has_next:
            try:
                next_read, next_write = os.pipe()
            except OSError as exc:
                _report("pipe", exc)
                if prev_read is not None:
                    os.close(prev_read)
                return 1
        _flush_streams()
        try:
            pid = os.fork()
        except OSError as exc:
            _report("fork", exc)
            for fd in (next_read, next_write, prev_read):
                if fd is not None:
                    os.close(fd)
            return 1
        if pid == 0:
            _run_child(shell, core, prev_read, next_read, next_write)
        if prev_read is not None:
            os.close(prev_read)
        if next_write is not None:
            os.close(next_write)
        prev_read = next_read
        pids.append(pid)
    if prev_read is not None:
        os.close(prev_read)
    status = wait_pids(pids)
    shell.last_status = status
    return status


def wait_pids(pids: Sequence[int]) -> int:
    """Wait for every child; return the status of the last one.

    A child killed by a signal reports 128 plus the signal number.
    """
    status = 0
    last = len(pids) - 1
    for index, pid in enumerate(pids):
        previous = ignore_sigint()
        try:
            try:
                _, raw = os.waitpid(pid, 0)
            except ChildProcessError:
                continue
            if index != last:
                continue
            if os.WIFEXITED(raw):
                status = os.WEXITSTATUS(raw)
            elif os.WIFSIGNALED(raw):
                signum = os.WTERMSIG(raw)
                status = 128 + signum
                if signum == signal.SIGINT:
                    sys.stdout.write("\n")
                    sys.stdout.flush()
        finally:
            signal.signal(
                signal.SIGINT, previous if previous is not None else signal.SIG_DFL
            )
    return status