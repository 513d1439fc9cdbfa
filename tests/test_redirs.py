import os

import pytest

from minishell.ast import Redirect
from minishell.lexer import TokenType
from minishell.redirs import apply_redirects, open_redirect, redirect_fd
from minishell.state import Shell


@pytest.fixture
def saved_fds():
    copies = [os.dup(0), os.dup(1)]
    yield
    for target, copy in zip((0, 1), copies):
        os.dup2(copy, target)
        os.close(copy)


def test_redirect_fd_targets():
    assert redirect_fd(TokenType.REDIR_OUT) == 1
    assert redirect_fd(TokenType.REDIR_APPEND) == 1
    assert redirect_fd(TokenType.REDIR_IN) == 0
    assert redirect_fd(TokenType.HEREDOC) == 0


def test_open_redirect_out_truncates(tmp_path):
    path = tmp_path / "out.txt"
    path.write_text("old contents")
    fd = open_redirect(TokenType.REDIR_OUT, str(path))
    os.write(fd, b"new")
    os.close(fd)
    assert path.read_text() == "new"


def test_open_redirect_append_keeps_contents(tmp_path):
    path = tmp_path / "log.txt"
    path.write_text("first\n")
    fd = open_redirect(TokenType.REDIR_APPEND, str(path))
    os.write(fd, b"second\n")
    os.close(fd)
    assert path.read_text() == "first\nsecond\n"


def test_open_redirect_missing_input(tmp_path):
    with pytest.raises(FileNotFoundError):
        open_redirect(TokenType.REDIR_IN, str(tmp_path / "missing"))


def test_open_redirect_rejects_heredoc(tmp_path):
    with pytest.raises(ValueError):
        open_redirect(TokenType.HEREDOC, str(tmp_path / "x"))


def test_apply_output_redirect(tmp_path, saved_fds):
    path = tmp_path / "out.txt"
    status = apply_redirects(Shell(), [Redirect(TokenType.REDIR_OUT, file_name=str(path))])
    os.write(1, b"through fd one\n")
    assert status == 0
    assert path.read_text() == "through fd one\n"


def test_apply_input_redirect(tmp_path, saved_fds):
    path = tmp_path / "in.txt"
    path.write_text("payload")
    status = apply_redirects(Shell(), [Redirect(TokenType.REDIR_IN, file_name=str(path))])
    assert status == 0
    assert os.read(0, 100) == b"payload"


def test_apply_heredoc(saved_fds):
    status = apply_redirects(Shell(), [Redirect(TokenType.HEREDOC, heredoc="a\nb\n")])
    assert status == 0
    assert os.read(0, 100) == b"a\nb\n"


def test_apply_later_redirect_wins(tmp_path, saved_fds):
    first = tmp_path / "first.txt"
    second = tmp_path / "second.txt"
    status = apply_redirects(
        Shell(),
        [
            Redirect(TokenType.REDIR_OUT, file_name=str(first)),
            Redirect(TokenType.REDIR_OUT, file_name=str(second)),
        ],
    )
    os.write(1, b"x")
    assert status == 0
    assert first.read_text() == ""
    assert second.read_text() == "x"


def test_apply_reports_missing_file(tmp_path, capsys):
    missing = str(tmp_path / "nope")
    status = apply_redirects(Shell(), [Redirect(TokenType.REDIR_IN, file_name=missing)])
    assert status == 1
    err = capsys.readouterr().err
    assert err.startswith(f"minishell: {missing}: ")


def test_apply_nothing():
    assert apply_redirects(Shell(), []) == 0