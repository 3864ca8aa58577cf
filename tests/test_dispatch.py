import io
import os
import signal

import pytest

from pingo.command import Command, ShellState
from pingo.dispatch import is_builtin, run_builtin, status_from_wait
from pingo.environment import Environment, ExportList
from pingo.errors import ShellExit


def make_state():
    return ShellState(
        env=Environment([("A", "1"), ("B", "2")]),
        exports=ExportList([("A", "1"), ("B", "2")]),
    )


def exited_status(code):
    """Raw wait status of a child that exited normally with ``code``."""
    return (code & 0xFF) << 8


def signaled_status(signum):
    """Raw wait status of a child terminated by ``signum``."""
    return int(signum) & 0x7F


@pytest.mark.parametrize("name", ["echo", "export", "env", "unset", "exit", "pwd", "cd"])
def test_is_builtin_accepts_builtins(name):
    assert is_builtin(name) is True


@pytest.mark.parametrize("name", ["ls", "", None, "ECHO", "echo "])
def test_is_builtin_rejects_others(name):
    assert is_builtin(name) is False


def test_status_from_wait_normal_exit():
    state = ShellState()
    status = exited_status(3)
    assert os.WIFEXITED(status)
    assert status_from_wait(status, state) == 3
    assert state.exit_status == 3


def test_status_from_wait_signal():
    state = ShellState()
    status = signaled_status(signal.SIGKILL)
    assert os.WIFSIGNALED(status)
    assert status_from_wait(status, state) == 128 + int(signal.SIGKILL)


def test_status_from_wait_failed_redirect_forces_one():
    state = ShellState(redirect_failed=True)
    assert status_from_wait(exited_status(0), state) == 1


def test_run_builtin_echo():
    state = make_state()
    out, err = io.StringIO(), io.StringIO()
    assert run_builtin(state, Command(["echo", "hello", "world"]), 1, out, err) == 0
    assert out.getvalue() == "hello world\n"
    assert state.exit_status == 0


def test_run_builtin_env_lists_variables():
    state = make_state()
    out, err = io.StringIO(), io.StringIO()
    assert run_builtin(state, Command(["env"]), 1, out, err) == 0
    assert out.getvalue() == "A=1\nB=2\n"


def test_run_builtin_env_too_many_arguments():
    state = make_state()
    out, err = io.StringIO(), io.StringIO()
    assert run_builtin(state, Command(["env", "x"]), 1, out, err) == 1
    assert "too many arguments" in err.getvalue()
    assert state.exit_status == 1


def test_run_builtin_unset_removes_from_both():
    state = make_state()
    out, err = io.StringIO(), io.StringIO()
    assert run_builtin(state, Command(["unset", "A"]), 1, out, err) == 0
    assert state.env.get("A") is None
    assert "A" not in state.exports
    assert state.env.get("B") == "2"


def test_run_builtin_export_sets_value():
    state = make_state()
    out, err = io.StringIO(), io.StringIO()
    assert run_builtin(state, Command(["export", "C=3"]), 1, out, err) == 1
    assert state.env.get("C") == "3"
    assert state.exports.get("C") == "3"


def test_run_builtin_exit_raises_with_last_status():
    state = make_state()
    state.exit_status = 4
    out, err = io.StringIO(), io.StringIO()
    with pytest.raises(ShellExit) as info:
        run_builtin(state, Command(["exit"]), 1, out, err)
    assert info.value.status == 4
    assert err.getvalue() == "exit\n"


def test_run_builtin_exit_in_pipeline_does_nothing():
    state = make_state()
    state.exit_status = 2
    out, err = io.StringIO(), io.StringIO()
    assert run_builtin(state, Command(["exit", "9"]), 2, out, err) == 2
    assert err.getvalue() == ""


def test_run_builtin_pwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    state = make_state()
    out, err = io.StringIO(), io.StringIO()
    assert run_builtin(state, Command(["pwd"]), 1, out, err) == 0
    assert out.getvalue() == f"{os.getcwd()}\n"


def test_run_builtin_cd_updates_pwd(tmp_path, monkeypatch):
    monkeypatch.chdir(os.getcwd())
    start = os.getcwd()
    state = make_state()
    out, err = io.StringIO(), io.StringIO()
    assert run_builtin(state, Command(["cd", str(tmp_path)]), 1, out, err) == 0
    assert os.getcwd() == os.path.realpath(tmp_path)
    assert state.env.get("PWD") == os.getcwd()
    assert state.env.get("OLDPWD") == start


def test_run_builtin_not_a_builtin():
    state = make_state()
    out, err = io.StringIO(), io.StringIO()
    assert run_builtin(state, Command(["ls"]), 1, out, err) is None
    assert run_builtin(state, Command([]), 1, out, err) is None