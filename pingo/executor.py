"""Running parsed commands: builtins in place, programs and pipelines in children."""

from __future__ import annotations

import contextlib
import errno
import functools
import os
import signal
import sys
from typing import Callable, Iterator, NoReturn, Sequence, TextIO

from pingo.command import Command, ShellState
from pingo.dispatch import is_builtin, run_builtin, status_from_wait
from pingo.errors import (
    EXIT_FAILURE,
    EXIT_NOT_EXECUTABLE,
    EXIT_NOT_FOUND,
    EXIT_SUCCESS,
    ShellExit,
    command_not_found,
    path_not_found,
)
from pingo.redirections import apply_redirections
from pingo.textutils import split_fields

_SELF = "./minishell"


@contextlib.contextmanager
def _fd_stream(fd: int) -> Iterator[TextIO]:
    """Yield a text stream writing straight to ``fd``, flushed on exit."""
    stream = open(fd, "w", closefd=False)
    try:
        yield stream
    finally:
        with contextlib.suppress(OSError, ValueError):
            stream.flush()


def _flush_std() -> None:
    for stream in (sys.stdout, sys.stderr):
        with contextlib.suppress(Exception):
            stream.flush()


@contextlib.contextmanager
def _ignoring_sigint() -> Iterator[None]:
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _report_signal(status: int) -> None:
    if not os.WIFSIGNALED(status):
        return
    sig = os.WTERMSIG(status)
    if sig == signal.SIGINT:
        os.write(2, b"\n")
    elif sig == signal.SIGQUIT:
        os.write(2, b"Quit: 3\n")


def _child(body: Callable[[TextIO], int]) -> NoReturn:
    """Run ``body`` in a forked child and leave with its status."""
    status = EXIT_FAILURE
    try:
        signal.signal(signal.SIGQUIT, signal.SIG_DFL)
        signal.signal(signal.SIGINT, signal.SIG_DFL)
        with _fd_stream(2) as err:
            try:
                status = body(err)
            except ShellExit as exc:
                status = exc.status
    except BaseException:
        status = EXIT_FAILURE
    finally:
        os._exit(status & 0xFF)


def check_path_target(path: str, stderr: TextIO) -> None:
    """Refuse a path that names a directory or a non-executable file.

    Raises :class:`ShellExit` with status 126 in both cases; a path that
    does not exist is left for the caller to report.
    """
    if os.path.isdir(path):
        stderr.write(f"minishell: {path}: is a directory\n")
        raise ShellExit(EXIT_NOT_EXECUTABLE)
    if os.path.isfile(path):
        stderr.write(f"minishell: {path}: Permission denied\n")
        raise ShellExit(EXIT_NOT_EXECUTABLE)


def find_executable(name: str, path: str) -> str | None:
    """Return the first ``dir/name`` on ``path`` that can be executed."""
    for directory in split_fields(path, ":"):
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.X_OK):
            return candidate
    return None


def _search_and_exec(
    argv: Sequence[str], state: ShellState, err: TextIO, *, fail_fast: bool
) -> int:
    """Try every ``PATH`` entry for ``argv[0]``; returns only on failure."""
    path = state.env.get("PATH") if state.env is not None else None
    if path is None:
        path_not_found(err)
        return EXIT_NOT_FOUND
    for directory in split_fields(path, ":"):
        candidate = f"{directory}/{argv[0]}"
        if not os.access(candidate, os.X_OK):
            continue
        try:
            os.execve(candidate, list(argv), state.envp)
        except OSError:
            if fail_fast:
                return EXIT_FAILURE
    command_not_found(argv, err)
    return EXIT_NOT_FOUND


def _single_body(
    state: ShellState, command: Command, heredoc_fd: int, err: TextIO
) -> int:
    argv = command.argv
    name = argv[0]
    if (
        "/" in name and name != _SELF and not os.access(name, os.X_OK)
    ) or name == "/":
        check_path_target(name, err)
    if command.files and command.redirections:
        apply_redirections(command.files, command.redirections, heredoc_fd, state)
    if "/" in name:
        if os.access(name, os.X_OK):
            try:
                os.execve(name, list(argv), state.envp)
            except OSError as exc:
                err.write(f"minishell: {exc.strerror}\n")
                return EXIT_FAILURE
        code = errno.EACCES if os.path.lexists(name) else errno.ENOENT
        err.write(f"minishell: {os.strerror(code)}\n")
        return EXIT_NOT_FOUND
    return _search_and_exec(argv, state, err, fail_fast=False)


def run_single(state: ShellState, command: Command, heredoc_fd: int) -> int:
    """Run one external command in a child process and wait for it."""
    if not command.argv or state.env is None:
        return state.exit_status
    _flush_std()
    pid = os.fork()
    if pid == 0:
        _child(functools.partial(_single_body, state, command, heredoc_fd))
    with _ignoring_sigint():
        _, status = os.waitpid(pid, 0)
    _report_signal(status)
    return status_from_wait(status, state)


def _connect_pipes(pipes: Sequence[tuple[int, int]], index: int, err: TextIO) -> None:
    try:
        if index > 0:
            os.dup2(pipes[index - 1][0], 0)
        if index < len(pipes):
            os.dup2(pipes[index][1], 1)
    except OSError as exc:
        err.write(f"dup2: {exc.strerror}\n")
        raise ShellExit(EXIT_FAILURE) from exc
    for read_end, write_end in pipes:
        os.close(read_end)
        os.close(write_end)


def _pipeline_body(
    state: ShellState,
    commands: Sequence[Command],
    index: int,
    pipes: Sequence[tuple[int, int]],
    heredoc_fd: int,
    err: TextIO,
) -> int:
    command = commands[index]
    if not command.argv:
        return EXIT_NOT_FOUND
    _connect_pipes(pipes, index, err)
    if command.files and command.redirections:
        apply_redirections(command.files, command.redirections, heredoc_fd, state)
    name = command.argv[0]
    if is_builtin(name):
        with _fd_stream(1) as out:
            run_builtin(state, command, len(commands), out, err)
        return EXIT_SUCCESS
    if "/" in name and os.access(name, os.X_OK):
        with contextlib.suppress(OSError):
            os.execve(name, list(command.argv), state.envp)
    return _search_and_exec(command.argv, state, err, fail_fast=True)


def run_pipeline(
    state: ShellState, commands: Sequence[Command], heredoc_fd: int
) -> int:
    """Run ``commands`` connected by pipes; the last one sets the status."""
    commands = list(commands)
    if not commands:
        return state.exit_status
    pipes: list[tuple[int, int]] = []
    try:
        for _ in range(len(commands) - 1):
            pipes.append(os.pipe())
    except OSError as exc:
        for read_end, write_end in pipes:
            os.close(read_end)
            os.close(write_end)
        sys.stderr.write(f"pipe: {exc.strerror}\n")
        state.exit_status = EXIT_FAILURE
        raise ShellExit(EXIT_FAILURE) from exc
    _flush_std()
    pids: list[int] = []
    for index in range(len(commands)):
        try:
            pid = os.fork()
        except OSError as exc:
            for started in pids:
                with contextlib.suppress(OSError):
                    os.kill(started, signal.SIGKILL)
            sys.stderr.write(f"fork: {exc.strerror}\n")
            break
        if pid == 0:
            _child(
                functools.partial(
                    _pipeline_body, state, commands, index, pipes, heredoc_fd
                )
            )
        pids.append(pid)
    for read_end, write_end in pipes:
        os.close(read_end)
        os.close(write_end)
    last_status: int | None = None
    with _ignoring_sigint():
        for index, pid in enumerate(pids):
            _, status = os.waitpid(pid, 0)
            if index == len(commands) - 1:
                last_status = status
    if last_status is not None:
        status_from_wait(last_status, state)
        _report_signal(last_status)
    return state.exit_status


def _run_builtin_here(state: ShellState, command: Command, heredoc_fd: int) -> None:
    if command.files and command.redirections:
        apply_redirections(command.files, command.redirections, heredoc_fd, state)
    with _fd_stream(1) as out, _fd_stream(2) as err:
        run_builtin(state, command, 1, out, err)


def execute(state: ShellState, commands: Sequence[Command], heredoc_fd: int) -> int:
    """Run one parsed command line and return the resulting exit status.

    A lone builtin runs in the shell itself; anything else runs in child
    processes.  Standard input and output are restored afterwards.
    """
    commands = list(commands)
    if not commands:
        return state.exit_status
    state.redirect_failed = False
    first = commands[0]
    _flush_std()
    saved_in = os.dup(0)
    saved_out = os.dup(1)
    try:
        if not first.argv and first.files and first.redirections:
            apply_redirections(first.files, first.redirections, heredoc_fd, state)
        elif len(commands) == 1 and first.argv:
            if is_builtin(first.argv[0]):
                _run_builtin_here(state, first, heredoc_fd)
            else:
                run_single(state, first, heredoc_fd)
        else:
            run_pipeline(state, commands, heredoc_fd)
    finally:
        _flush_std()
        os.dup2(saved_in, 0)
        os.dup2(saved_out, 1)
        os.close(saved_in)
        os.close(saved_out)
    return state.exit_status