import os
import signal
import subprocess

import pytest

from minishell.ast import Command, Pipeline, Redirect
from minishell.executor import (
    exec_ast,
    exec_core,
    exec_grouping,
    exec_logical,
    exec_node,
    exec_pipeline,
    wait_pids,
)
from minishell.lexer import TokenType
from minishell.parser import parse
from minishell.state import Shell


@pytest.fixture(autouse=True)
def _keep_signals():
    names = ("SIGINT", "SIGQUIT", "SIGPIPE")
    saved = {
        getattr(signal, n): signal.getsignal(getattr(signal, n))
        for n in names
        if hasattr(signal, n)
    }
    yield
    for signum, handler in saved.items():
        if handler is not None:
            signal.signal(signum, handler)


@pytest.fixture
def shell(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return Shell(dict(os.environ))


def run(shell, text):
    return exec_ast(shell, parse(shell, text))


def test_true_and_false_statuses(shell):
    assert run(shell, "true") == 0
    assert shell.last_status == 0
    assert run(shell, "false") == 1
    assert shell.last_status == 1


def test_and_list_short_circuits(shell, tmp_path):
    assert run(shell, "false && /bin/echo x > out") == 1
    assert not (tmp_path / "out").exists()


def test_and_list_runs_right_after_success(shell, tmp_path):
    assert run(shell, "true && /bin/echo yes > out") == 0
    assert (tmp_path / "out").read_text() == "yes\n"


def test_or_list_runs_right_after_failure(shell, tmp_path):
    assert run(shell, "false || /bin/echo yes > out") == 0
    assert (tmp_path / "out").read_text() == "yes\n"


def test_or_list_skips_right_after_success(shell, tmp_path):
    assert run(shell, "true || /bin/echo x > out") == 0
    assert not (tmp_path / "out").exists()


def test_pipeline_connects_output_to_input(shell, tmp_path):
    assert run(shell, "/bin/echo hello | cat > out") == 0
    assert (tmp_path / "out").read_text() == "hello\n"


@pytest.mark.parametrize("text, expected", [("true | false", 1), ("false | true", 0)])
def test_pipeline_status_is_last_core(shell, text, expected):
    assert run(shell, text) == expected
    assert shell.last_status == expected


def test_single_builtin_runs_in_shell(shell):
    assert run(shell, "export FOO=bar") == 0
    assert shell.env.get_value("FOO") == "bar"


def test_builtin_inside_pipeline_runs_in_child(shell):
    assert run(shell, "export FOO=bar | true") == 0
    assert shell.env.get_value("FOO") is None


def test_grouping_status_and_redirect(shell, tmp_path):
    assert run(shell, "(false)") == 1
    assert run(shell, "(/bin/echo hi) > out") == 0
    assert (tmp_path / "out").read_text() == "hi\n"


def test_grouping_redirect_failure(shell):
    assert run(shell, "(true) < missing") == 1


def test_exec_grouping_in_process_applies_redirects(shell, tmp_path):
    tree = parse(shell, "(true) < missing")
    grouping = tree.body.cores[0]
    assert exec_grouping(shell, grouping) == 1


def test_exec_core_restores_stdout(shell, tmp_path):
    out = tmp_path / "out"
    before = os.fstat(1)
    core = Command(
        argv=["unset", "X"],
        redirs=[Redirect(TokenType.REDIR_OUT, file_name=str(out))],
    )
    assert exec_core(shell, core, False) == 0
    after = os.fstat(1)
    assert out.exists()
    assert (after.st_dev, after.st_ino) == (before.st_dev, before.st_ino)


def test_exec_core_rejects_non_core(shell):
    shell.last_status = 5
    assert exec_core(shell, Pipeline([]), False) == 1
    assert shell.last_status == 5


def test_exec_node_and_logical_invalid(shell):
    assert exec_node(shell, None) == 1
    assert exec_logical(shell, Pipeline([])) == 1


def test_exec_node_runs_bare_command(shell):
    assert exec_node(shell, Command(argv=["true"])) == 0


def test_empty_pipeline_succeeds(shell):
    assert exec_pipeline(shell, Pipeline([])) == 0


def test_wait_pids_reports_exit_code():
    proc = subprocess.Popen(["sh", "-c", "exit 3"])
    assert wait_pids([proc.pid]) == 3


def test_wait_pids_uses_last_child_only():
    first = subprocess.Popen(["sh", "-c", "exit 3"])
    second = subprocess.Popen(["true"])
    assert wait_pids([first.pid, second.pid]) == 0


def test_wait_pids_signaled_child():
    proc = subprocess.Popen(["sh", "-c", "kill -TERM $$"])
    assert wait_pids([proc.pid]) == 128 + signal.SIGTERM


def test_wait_pids_empty():
    assert wait_pids([]) == 0


def test_wait_pids_keeps_sigint_handler():
    def handler(signum, frame):
        return None

    signal.signal(signal.SIGINT, handler)
    proc = subprocess.Popen(["sh", "-c", "exit 2"])
    assert wait_pids([proc.pid]) == 2
    assert signal.getsignal(signal.SIGINT) is handler