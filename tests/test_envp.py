import pytest

from minishell.envp import (
    Environment,
    Variable,
    key_len,
    name_from_assign,
    value_from_assign,
)


@pytest.fixture
def env():
    e = Environment()
    e.set("HOME=/home/user", True)
    e.set("PATH=/bin:/usr/bin", True)
    e.set("LOCAL=value", False)
    return e


def test_key_len_stops_at_equals():
    assert key_len("FOO=bar") == len("FOO")
    assert key_len("A_1+=x") == len("A_1")
    assert key_len("=x") == 0


def test_name_and_value_from_assign():
    assert name_from_assign("FOO=bar=baz") == "FOO"
    assert value_from_assign("FOO=bar=baz") == "bar=baz"
    assert name_from_assign("FOO") == "FOO"
    assert value_from_assign("FOO") is None
    assert value_from_assign("FOO=") == ""


def test_variable_from_assignment():
    var = Variable.from_assignment("USER=someone", True)
    assert (var.name, var.value, var.export) == ("USER", "someone", True)
    assert var.length == len("USER")


def test_set_and_get_round_trip(env):
    assert env.get_value("HOME") == "/home/user"
    assert env.get("PATH").export is True
    assert env.get("LOCAL").export is False
    assert len(env) == 3


def test_get_uses_name_prefix(env):
    assert env.get("HOME=ignored").name == "HOME"
    assert env.get_value("HOME/sub") == "/home/user"
    assert env.get("HOM") is None
    assert env.get(None) is None
    assert env.get_value("MISSING") is None


def test_set_existing_updates_value_keeps_export(env):
    var = env.set("LOCAL=new", True)
    assert var.value == "new"
    assert var.export is False
    assert len(env) == 3


def test_set_without_value_keeps_existing_value(env):
    env.set("HOME", True)
    assert env.get_value("HOME") == "/home/user"


def test_set_new_without_value():
    e = Environment()
    var = e.set("EMPTY", True)
    assert var.value is None
    assert e.to_list(False) == ["EMPTY"]


def test_append_extends_existing(env):
    env.append("LOCAL+=more", False)
    assert env.get_value("LOCAL") == "value" + "more"


def test_append_to_valueless_variable():
    e = Environment()
    e.set("X", True)
    e.append("X+=tail", True)
    assert e.get_value("X") == "tail"


def test_append_creates_missing_variable():
    e = Environment()
    var = e.append("NEW=abc", True)
    assert var.name == "NEW"
    assert e.get_value("NEW") == "abc"


def test_unset(env):
    assert env.unset("PATH") is True
    assert env.get("PATH") is None
    assert env.unset("PATH") is False
    assert [v.name for v in env] == ["HOME", "LOCAL"]


def test_unset_only_variable():
    e = Environment()
    e.set("ONLY=1", True)
    assert e.unset("ONLY") is True
    assert len(e) == 0


def test_to_list_filters_exported(env):
    assert env.to_list(False) == ["HOME=/home/user", "PATH=/bin:/usr/bin", "LOCAL=value"]
    assert env.to_list(True) == ["HOME=/home/user", "PATH=/bin:/usr/bin"]


def test_iteration_preserves_insertion_order(env):
    env.set("ZED=1", True)
    assert [v.name for v in env] == ["HOME", "PATH", "LOCAL", "ZED"]


def test_clear(env):
    env.clear()
    assert len(env) == 0
    assert env.to_list(False) == []