"""The ``echo``, ``env``, ``pwd`` and ``unset`` builtins."""

from __future__ import annotations

import os
from typing import Sequence, TextIO

from pingo.environment import Environment, ExportList


def _is_n_flag(arg: str) -> bool:
    return len(arg) >= 2 and arg[0] == "-" and set(arg[1:]) == {"n"}


def echo(args: Sequence[str] | None, stdout: TextIO) -> int:
    """Print the arguments after ``args[0]``; leading ``-n`` flags drop the newline."""
    if args is None:
        return 1
    words = list(args[1:])
    flags = 0
    for word in words:
        if not _is_n_flag(word):
            break
        flags += 1
    stdout.write(" ".join(words[flags:]))
    if flags == 0:
        stdout.write("\n")
    return 0


def print_env(
    env: Environment,
    args: Sequence[str] | None,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Print every ``NAME=VALUE``; extra arguments are an error."""
    if args and len(args) > 1:
        stderr.write("env: too many arguments\n")
        return 1
    if not len(env):
        return 1
    for name, value in env.items():
        stdout.write(f"{name}={value}\n")
    return 0


def pwd(env: Environment, stdout: TextIO) -> int:
    """Print the working directory, falling back to ``PWD`` when it is gone."""
    try:
        cwd = os.getcwd()
    except OSError:
        stdout.write(f"{env.get('PWD') or ''}\n")
        return 1
    stdout.write(f"{cwd}\n")
    return 0


def is_valid_unset_name(name: str) -> bool:
    """Tell whether ``name`` holds only ASCII letters and digits."""
    return all(ch.isascii() and ch.isalnum() for ch in name)


def unset(
    exports: ExportList,
    env: Environment,
    args: Sequence[str] | None,
    stderr: TextIO,
) -> int:
    """Remove each named variable from the environment and the export list."""
    if not args or len(args) < 2:
        return 1
    for name in args[1:]:
        if not is_valid_unset_name(name):
            stderr.write(f"minishell: unset: `{name}': not a valid identifier\n")
            continue
        if env is not None:
            env.remove(name)
        if exports is not None:
            exports.remove(name)
    return 0