import io
import os

import pytest

from pingo.environment import Environment, ExportList
from pingo.simple_builtins import echo, is_valid_unset_name, print_env, pwd, unset


def run_echo(args):
    out = io.StringIO()
    status = echo(args, out)
    return status, out.getvalue()


def test_echo_joins_with_spaces():
    assert run_echo(["echo", "a", "b"]) == (0, "a b\n")


@pytest.mark.parametrize("flags", [["-n"], ["-nnn"], ["-nnn", "-n"]])
def test_echo_n_flags_suppress_newline(flags):
    assert run_echo(["echo", *flags, "a"]) == (0, "a")


@pytest.mark.parametrize("word", ["-nx", "-", "-N"])
def test_echo_non_flags_are_printed(word):
    assert run_echo(["echo", word]) == (0, word + "\n")


def test_echo_flag_after_word_is_printed():
    assert run_echo(["echo", "a", "-n"]) == (0, "a -n\n")


def test_echo_empty_argument():
    assert run_echo(["echo", ""]) == (0, "\n")


def test_echo_none():
    assert run_echo(None) == (1, "")


def test_print_env_lists_variables():
    env = Environment([("A", "1"), ("B", "2")])
    out = io.StringIO()
    assert print_env(env, ["env"], out, io.StringIO()) == 0
    assert out.getvalue() == "A=1\nB=2\n"


def test_print_env_too_many_arguments():
    err = io.StringIO()
    out = io.StringIO()
    assert print_env(Environment([("A", "1")]), ["env", "x"], out, err) == 1
    assert err.getvalue() == "env: too many arguments\n"
    assert out.getvalue() == ""


def test_print_env_empty_environment():
    assert print_env(Environment(), ["env"], io.StringIO(), io.StringIO()) == 1


def test_pwd_prints_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    assert pwd(Environment(), out) == 0
    assert out.getvalue() == os.getcwd() + "\n"


def test_pwd_falls_back_to_env(monkeypatch):
    def failing():
        raise FileNotFoundError("gone")

    monkeypatch.setattr(os, "getcwd", failing)
    out = io.StringIO()
    assert pwd(Environment([("PWD", "/somewhere")]), out) == 1
    assert out.getvalue() == "/somewhere\n"


@pytest.mark.parametrize("name,valid", [("ABC1", True), ("", True), ("A_B", False), ("a-b", False)])
def test_is_valid_unset_name(name, valid):
    assert is_valid_unset_name(name) is valid


def test_unset_removes_from_both():
    env = Environment([("A", "1"), ("B", "2")])
    exports = ExportList([("A", "1"), ("B", "2")])
    assert unset(exports, env, ["unset", "A"], io.StringIO()) == 0
    assert "A" not in env
    assert "A" not in exports
    assert env.get("B") == "2"


def test_unset_reports_invalid_and_continues():
    env = Environment([("A", "1")])
    exports = ExportList([("A", "1")])
    err = io.StringIO()
    assert unset(exports, env, ["unset", "x-y", "A"], err) == 0
    assert err.getvalue() == "minishell: unset: `x-y': not a valid identifier\n"
    assert "A" not in env


def test_unset_without_names():
    env = Environment([("A", "1")])
    assert unset(ExportList(), env, ["unset"], io.StringIO()) == 1
    assert env.get("A") == "1"


def test_unset_missing_name_is_ignored():
    env = Environment([("A", "1")])
    exports = ExportList([("A", "1")])
    assert unset(exports, env, ["unset", "Z"], io.StringIO()) == 0
    assert env.items() == [("A", "1")]