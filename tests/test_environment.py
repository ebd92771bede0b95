import pytest

from minishell.environment import EnvVar, Environment, VarFlag, is_valid_identifier


@pytest.fixture
def env():
    return Environment.from_strings(["HOME=/home/user", "_=/usr/bin/env", "EMPTY=", "X=a=b"])


def test_from_strings_values(env):
    assert env.get("HOME") == "/home/user"
    assert env.get("EMPTY") == ""
    assert env.get("X") == "a=b"
    assert env.get("MISSING") is None


def test_from_strings_flags(env):
    assert env.find("_").flag is VarFlag.HIDDEN
    assert env.find("HOME").flag is VarFlag.EXPORTED


def test_order_len_contains(env):
    assert env.names() == ["HOME", "_", "EMPTY", "X"]
    assert len(env) == 4
    assert "HOME" in env
    assert "NOPE" not in env
    assert [var.name for var in env] == env.names()


def test_export_new_with_value(env):
    var = env.export("NEW=val")
    assert var == EnvVar("NEW", "val", VarFlag.EXPORTED)
    assert env.names()[-1] == "NEW"


def test_export_new_without_value(env):
    env.export("DECL")
    var = env.find("DECL")
    assert var.value is None
    assert var.flag is VarFlag.DECLARED


def test_export_new_empty_assignment(env):
    env.export("E2=")
    assert env.get("E2") == ""
    assert env.find("E2").flag is VarFlag.EXPORTED


def test_export_existing_without_equals_keeps_value(env):
    env.export("HOME")
    assert env.get("HOME") == "/home/user"
    assert len(env) == 4


def test_export_existing_with_equals_updates_in_place(env):
    env.export("_=shown")
    var = env.find("_")
    assert var.value == "shown"
    assert var.flag is VarFlag.EXPORTED
    assert env.names() == ["HOME", "_", "EMPTY", "X"]


def test_export_invalid_raises_and_leaves_table(env):
    before = env.to_envp()
    with pytest.raises(ValueError, match="not a valid identifier"):
        env.export("1BAD=x")
    assert env.to_envp() == before


def test_unset(env):
    env.unset("HOME")
    assert "HOME" not in env
    env.unset("NOT_THERE")
    assert len(env) == 3


def test_set_keeps_flag_and_adds_new(env):
    env.set("_", "/bin/ls")
    assert env.find("_").flag is VarFlag.HIDDEN
    assert env.get("_") == "/bin/ls"
    env.set("OLDPWD", "/tmp")
    assert env.find("OLDPWD").flag is VarFlag.EXPORTED
    assert env.names()[-1] == "OLDPWD"


def test_to_envp_round_trip(env):
    envp = env.to_envp()
    assert Environment.from_strings(envp).to_envp() == envp
    assert "X=a=b" in envp


def test_to_envp_declared_variable(env):
    env.export("DECL")
    assert "DECL=" in env.to_envp()


def test_empty_environment():
    empty = Environment.from_strings([])
    assert len(empty) == 0
    assert empty.to_envp() == []


@pytest.mark.parametrize("arg", ["HOME", "_x", "A1=", "A=1-2 3", "a_b=c"])
def test_valid_identifiers(arg):
    assert is_valid_identifier(arg) is True


@pytest.mark.parametrize("arg", ["", "1A", "=x", "A-B", "A B", "é=1"])
def test_invalid_identifiers(arg):
    assert is_valid_identifier(arg) is False