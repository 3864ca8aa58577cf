"""The ``exit`` builtin."""

from __future__ import annotations

from typing import Sequence, TextIO

from pingo.command import ShellState
from pingo.errors import ShellExit
from pingo.textutils import LLONG_MAX, LLONG_MIN, parse_long_long

INT_MAX = 2**31 - 1
INT_MIN = -(2**31)


def is_numeric(text: str) -> bool:
    """Tell whether ``text`` is an optional sign followed by one or more digits."""
    digits = text[1:] if text[:1] in ("-", "+") else text
    return bool(digits) and all("0" <= ch <= "9" for ch in digits)


def _numeric_error(
    state: ShellState, arg: str, status: int, stderr: TextIO, *, leave: bool
) -> None:
    stderr.write("exit\n")
    stderr.write(f"minishell: exit: {arg}: numeric argument required\n")
    state.exit_status = status
    if leave:
        raise ShellExit(status)


def normalize_exit_code(
    code: int, arg: str, state: ShellState, stderr: TextIO
) -> int:
    """Bring a parsed exit argument into range, or leave on overflow.

    Values above the int range end the shell with 255, values below it
    with 0.  Larger values are reduced modulo 256; negative ones are
    shifted up by 256.
    """
    if code == LLONG_MAX or code > INT_MAX:
        _numeric_error(state, arg, 255, stderr, leave=True)
    if code == LLONG_MIN or code < INT_MIN:
        _numeric_error(state, arg, 0, stderr, leave=True)
    if code > 255:
        return code % 256
    if code < 0:
        return code + 256
    return code


def builtin_exit(
    state: ShellState,
    args: Sequence[str] | None,
    command_count: int,
    stderr: TextIO,
) -> int:
    """Run ``exit``; raises :class:`ShellExit` when the shell should end.

    Inside a pipeline the builtin does nothing.  When it returns, the
    result is the shell's exit status.
    """
    if args is None or command_count > 1:
        return state.exit_status
    if len(args) > 2:
        if is_numeric(args[1]):
            stderr.write("minishell: exit: too many arguments\n")
            state.exit_status = 1
        else:
            _numeric_error(state, args[1], 255, stderr, leave=False)
        return state.exit_status
    if len(args) == 2:
        arg = args[1]
        if not is_numeric(arg):
            _numeric_error(state, arg, 255, stderr, leave=True)
        code = normalize_exit_code(parse_long_long(arg), arg, state, stderr) & 0xFF
        state.exit_status = code
        stderr.write("exit\n")
        raise ShellExit(code)
    stderr.write("exit\n")
    raise ShellExit(state.exit_status)