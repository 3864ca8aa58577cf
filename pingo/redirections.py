"""Applying ``<``, ``<<``, ``>`` and ``>>`` redirections to the standard streams."""

from __future__ import annotations

import os
import sys
from typing import Sequence

from pingo.command import ShellState
from pingo.errors import EXIT_FAILURE, ShellExit

_OUTPUT_FLAGS = {
    ">": os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    ">>": os.O_WRONLY | os.O_CREAT | os.O_APPEND,
}
_INPUT_OPERATORS = ("<", "<<")
_PASSTHROUGH = ("/dev/stdout", "/dev/stdin")
_STDIN = 0
_STDOUT = 1


def _report(exc: OSError, prefix: str = "minishell") -> None:
    sys.stderr.write(f"{prefix}: {exc.strerror or exc}\n")


def open_output(file: str, redir: str) -> int | None:
    """Open ``file`` for ``>`` (truncate) or ``>>`` (append).

    Returns the new descriptor, or ``None`` for any other operator.
    Raises :class:`OSError` when the file cannot be opened.
    """
    flags = _OUTPUT_FLAGS.get(redir)
    if flags is None:
        return None
    return os.open(file, flags, 0o644)


def open_input(file: str, redir: str, heredoc_fd: int) -> int:
    """Return the descriptor that feeds ``<`` or ``<<``.

    Raises :class:`OSError` when ``file`` cannot be opened and
    :class:`ValueError` for an operator that is not an input one.
    """
    if redir == "<":
        return os.open(file, os.O_RDONLY)
    if redir == "<<":
        return heredoc_fd
    raise ValueError(f"not an input redirection: {redir!r}")


def apply_single_redirection(
    files: Sequence[str],
    redirections: Sequence[str],
    heredoc_fd: int,
    state: ShellState,
) -> bool:
    """Apply the first redirection only; return ``False`` if it failed.

    An output file that cannot be opened ends the process with status 1.
    An input file that cannot be opened marks ``state.redirect_failed``.
    """
    if not files or not redirections:
        return False
    redir, file = redirections[0], files[0]
    if redir in _OUTPUT_FLAGS:
        try:
            fd = open_output(file, redir)
        except OSError as exc:
            _report(exc)
            state.exit_status = EXIT_FAILURE
            raise ShellExit(EXIT_FAILURE) from exc
        try:
            os.dup2(fd, _STDOUT)
        except OSError as exc:
            _report(exc)
            return False
        finally:
            os.close(fd)
        return True
    if redir == "<<":
        if heredoc_fd == -1:
            sys.stderr.write(f"heredoc: {os.strerror(9)}\n")
            return False
        try:
            os.dup2(heredoc_fd, _STDIN)
        except OSError as exc:
            os.close(heredoc_fd)
            _report(exc)
            return False
        os.close(heredoc_fd)
        return True
    if redir == "<":
        try:
            fd = open_input(file, redir, heredoc_fd)
        except OSError as exc:
            _report(exc)
            state.redirect_failed = True
            return False
        try:
            os.dup2(fd, _STDIN)
        except OSError as exc:
            if file == "/dev/stdout":
                _report(exc)
                return False
        finally:
            os.close(fd)
    return True


def _release(out_fd: int | None, in_fd: int | None, heredoc_fd: int) -> None:
    if out_fd is not None:
        os.close(out_fd)
    if in_fd is not None and in_fd != heredoc_fd:
        os.close(in_fd)


def apply_redirections(
    files: Sequence[str] | None,
    redirections: Sequence[str] | None,
    heredoc_fd: int,
    state: ShellState,
) -> bool:
    """Apply every redirection in order; the last of each direction wins.

    ``/dev/stdout`` and ``/dev/stdin`` targets are left alone.  Returns
    ``False`` if a file could not be opened or a stream not redirected.
    """
    if not files or not redirections:
        return True
    if len(redirections) == 1:
        apply_single_redirection(files, redirections, heredoc_fd, state)
        return True
    out_fd: int | None = None
    in_fd: int | None = None
    for redir, file in zip(redirections, files):
        if file in _PASSTHROUGH:
            continue
        if redir in _OUTPUT_FLAGS:
            if out_fd is not None:
                os.close(out_fd)
                out_fd = None
            try:
                out_fd = open_output(file, redir)
            except OSError as exc:
                _report(exc)
                _release(out_fd, in_fd, heredoc_fd)
                return False
        elif redir in _INPUT_OPERATORS:
            if in_fd is not None and in_fd != heredoc_fd:
                os.close(in_fd)
            in_fd = None
            try:
                opened = open_input(file, redir, heredoc_fd)
            except OSError as exc:
                _report(exc)
                _release(out_fd, in_fd, heredoc_fd)
                return False
            in_fd = None if opened == -1 else opened
    try:
        if out_fd is not None:
            os.dup2(out_fd, _STDOUT)
        if in_fd is not None:
            os.dup2(in_fd, _STDIN)
    except OSError as exc:
        _report(exc)
        _release(out_fd, in_fd, heredoc_fd)
        return False
    _release(out_fd, in_fd, heredoc_fd)
    return True