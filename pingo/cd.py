"""The ``cd`` builtin."""

from __future__ import annotations

import errno
import os
from typing import Sequence, TextIO

from pingo.environment import Environment, ExportList

_HOME_ALIASES = ("~", "~/", "--")
_LOST_CWD_MESSAGE = (
    "cd: error retrieving"
    "current directory :getcwd: cannot"
    "access parent directories : "
    "No such file or directory\n"
)


def _report(exc: OSError, stderr: TextIO) -> None:
    stderr.write(f"cd: {exc.strerror or exc}\n")


def _home(env: Environment, stderr: TextIO) -> str | None:
    path = env.get("HOME")
    if path is None:
        stderr.write("cd: HOME not set\n")
    return path


def resolve_target(
    env: Environment, args: Sequence[str], stdout: TextIO, stderr: TextIO
) -> str | None:
    """Work out the directory ``cd`` should enter, or ``None`` if there is none.

    No argument, ``~``, ``~/`` and ``--`` mean ``HOME``; ``-`` means
    ``OLDPWD``, which is also printed.
    """
    if len(args) == 1:
        return _home(env, stderr)
    if len(args) == 2:
        target = args[1]
        if target in _HOME_ALIASES:
            return _home(env, stderr)
        if target == "-":
            path = env.get("OLDPWD")
            if path is None:
                stderr.write("cd: OLDPWD not set\n")
            else:
                stdout.write(f"{path}\n")
            return path
        return target
    stderr.write("cd: invalid usage\n")
    return None


def record_directories(env: Environment, oldpath: str, newpath: str) -> None:
    """Store the previous and the new directory in ``OLDPWD`` and ``PWD``."""
    env.set("OLDPWD", oldpath)
    env.set("PWD", newpath)


def _change_directory(path: str | None, stderr: TextIO) -> bool:
    if path is None:
        stderr.write(f"cd: {os.strerror(errno.EFAULT)}\n")
        return False
    try:
        os.chdir(path)
    except OSError as exc:
        _report(exc, stderr)
        return False
    return True


def _cd_without_cwd(
    env: Environment,
    exports: ExportList | None,
    args: Sequence[str],
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Handle ``cd`` when the current directory no longer exists."""
    if len(args) < 2:
        return 0
    target = args[1]
    pwd = env.get("PWD")
    if target in ("..", ".") and pwd is not None:
        joined = f"{pwd}/{target}"
        env.set("PWD", joined)
        if exports is not None and "PWD" in exports:
            exports.set("PWD", joined)
    path = resolve_target(env, args, stdout, stderr)
    if not _change_directory(path, stderr):
        return 1
    stderr.write(_LOST_CWD_MESSAGE)
    return 0


def cd(
    env: Environment,
    exports: ExportList | None,
    args: Sequence[str],
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Run ``cd`` with ``args`` (``args[0]`` is the command name)."""
    if not args or env is None or not len(env):
        return 1
    if len(args) > 2:
        stderr.write("cd: to many argumants\n")
        return 1
    try:
        oldpath = os.getcwd()
    except OSError:
        return _cd_without_cwd(env, exports, args, stdout, stderr)
    path = resolve_target(env, args, stdout, stderr)
    if path is None:
        return 1
    if not _change_directory(path, stderr):
        return 1
    try:
        newpath = os.getcwd()
    except OSError:
        stderr.write("cd: error retrieving current directory\n")
        return 0
    record_directories(env, oldpath, newpath)
    return 0