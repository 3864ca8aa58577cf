import io

import pytest

from pingo.environment import Environment, ExportList
from pingo.export import export, export_arg, format_exports, split_assignment


def make_lists():
    env = Environment([("HOME", "/home/u"), ("PATH", "/bin")])
    exports = ExportList([("HOME", "/home/u"), ("PATH", "/bin")])
    return env, exports


def test_split_assignment_with_value():
    assert split_assignment("A=1") == ("A", "1")


def test_split_assignment_keeps_later_equals_in_value():
    assert split_assignment("A=b=c") == ("A", "b=c")


@pytest.mark.parametrize("arg", ["A", "A="])
def test_split_assignment_without_value(arg):
    assert split_assignment(arg) == ("A", None)


def test_export_arg_sets_both_lists():
    env, exports = make_lists()
    err = io.StringIO()
    assert export_arg(exports, env, "FOO=bar", err) is True
    assert env.get("FOO") == "bar"
    assert exports.get("FOO") == "bar"
    assert err.getvalue() == ""


def test_export_arg_empty_value():
    env, exports = make_lists()
    assert export_arg(exports, env, "FOO=", io.StringIO()) is True
    assert env.get("FOO") == ""
    assert exports.get("FOO") == ""


def test_export_arg_declare_only():
    env, exports = make_lists()
    assert export_arg(exports, env, "FOO", io.StringIO()) is True
    assert "FOO" in exports
    assert exports.get("FOO") is None
    assert "FOO" not in env


def test_export_arg_append_existing():
    env, exports = make_lists()
    assert export_arg(exports, env, "PATH+=:/usr/bin", io.StringIO()) is True
    assert env.get("PATH") == "/bin" + ":/usr/bin"
    assert exports.get("PATH") == "/bin" + ":/usr/bin"


def test_export_arg_append_new_name():
    env, exports = make_lists()
    assert export_arg(exports, env, "NEW+=x", io.StringIO()) is True
    assert env.get("NEW") == "x"
    assert exports.get("NEW") == "x"


@pytest.mark.parametrize("arg", ["1A=2", "_A=1", "MY_VAR=1", "a-b=1", "a+b=1", "=x", ""])
def test_export_arg_rejects_invalid(arg):
    env, exports = make_lists()
    before = exports.items()
    err = io.StringIO()
    assert export_arg(exports, env, arg, err) is False
    assert "not a valid identifier" in err.getvalue()
    assert exports.items() == before


def test_invalid_message_names_the_identifier():
    env, exports = make_lists()
    err = io.StringIO()
    export_arg(exports, env, "a-b=1", err)
    assert err.getvalue() == "minishell: export: `a-b': not a valid identifier\n"


def test_format_exports_skips_underscore():
    exports = ExportList([("A", None), ("B", "x"), ("_", "y")])
    assert format_exports(exports) == 'declare -x A\ndeclare -x B="x"\n'


def test_export_without_arguments_prints_sorted():
    env, exports = make_lists()
    exports.declare("AAA")
    out = io.StringIO()
    status = export(exports, env, ["export"], out, io.StringIO())
    assert status == 1
    lines = out.getvalue().splitlines()
    assert all(line.startswith("declare -x ") for line in lines)
    assert lines == sorted(lines)
    assert lines[0] == "declare -x AAA"


def test_export_with_arguments_prints_nothing():
    env, exports = make_lists()
    out = io.StringIO()
    assert export(exports, env, ["export", "X=1"], out, io.StringIO()) == 1
    assert out.getvalue() == ""
    assert [name for name, _ in exports.items()] == sorted(exports)


def test_export_single_invalid_argument_returns_zero():
    env, exports = make_lists()
    assert export(exports, env, ["export", "1bad"], io.StringIO(), io.StringIO()) == 0


def test_export_continues_after_invalid_argument():
    env, exports = make_lists()
    err = io.StringIO()
    status = export(exports, env, ["export", "1bad", "GOOD=1"], io.StringIO(), err)
    assert status == 1
    assert env.get("GOOD") == "1"
    assert "1bad" in err.getvalue()


def test_export_removes_duplicates():
    env = Environment([("A", "1")])
    exports = ExportList([("A", "1"), ("A", "2")])
    export(exports, env, ["export"], io.StringIO(), io.StringIO())
    assert exports.items() == [("A", "1")]


def test_export_empty_list_returns_zero():
    out = io.StringIO()
    assert export(ExportList(), Environment(), ["export"], out, io.StringIO()) == 0
    assert out.getvalue() == ""