"""Recognising builtins, running them and turning wait statuses into exit codes."""

from __future__ import annotations

import os
from typing import Callable, Sequence, TextIO

from pingo.cd import cd
from pingo.command import Command, ShellState
from pingo.exit_builtin import builtin_exit
from pingo.export import export
from pingo.simple_builtins import echo, print_env, pwd, unset

BUILTINS = frozenset({"echo", "export", "env", "unset", "exit", "pwd", "cd"})

_Handler = Callable[[ShellState, Sequence[str], int, TextIO, TextIO], int]

_HANDLERS: dict[str, _Handler] = {
    "echo": lambda state, argv, count, out, err: echo(argv, out),
    "cd": lambda state, argv, count, out, err: cd(
        state.env, state.exports, argv, out, err
    ),
    "pwd": lambda state, argv, count, out, err: pwd(state.env, out),
    "export": lambda state, argv, count, out, err: export(
        state.exports, state.env, argv, out, err
    ),
    "env": lambda state, argv, count, out, err: print_env(state.env, argv, out, err),
    "exit": lambda state, argv, count, out, err: builtin_exit(state, argv, count, err),
    "unset": lambda state, argv, count, out, err: unset(
        state.exports, state.env, argv, err
    ),
}


def is_builtin(name: str | None) -> bool:
    """Tell whether ``name`` is one of the shell's own commands."""
    return bool(name) and name in BUILTINS


def status_from_wait(status: int, state: ShellState) -> int:
    """Store and return the exit status a raw wait status stands for.

    A failed input redirection forces 1; a normal exit gives its code; a
    signal gives 128 plus the signal number; anything else gives 1.
    """
    if state.redirect_failed:
        code = 1
    elif os.WIFEXITED(status):
        code = os.WEXITSTATUS(status)
    elif os.WIFSIGNALED(status):
        code = 128 + os.WTERMSIG(status)
    else:
        code = 1
    state.exit_status = code
    return code


def run_builtin(
    state: ShellState,
    command: Command,
    command_count: int,
    stdout: TextIO,
    stderr: TextIO,
) -> int | None:
    """Run ``command`` if it is a builtin and return its exit status.

    Redirections are applied by the caller.  Returns ``None`` when the
    command is not a builtin.
    """
    if not command.argv:
        return None
    handler = _HANDLERS.get(command.argv[0])
    if handler is None:
        return None
    state.exit_status = handler(state, command.argv, command_count, stdout, stderr)
    return state.exit_status