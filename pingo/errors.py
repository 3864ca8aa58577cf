"""Exit requests raised by the shell and the messages that go with them."""

from __future__ import annotations

from typing import Sequence, TextIO

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127


class ShellExit(Exception):
    """Request to end the current shell process with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status

    def __str__(self) -> str:
        return f"exit status {self.status}"


def command_not_found(argv: Sequence[str] | None, stderr: TextIO) -> None:
    """Report an unknown command and raise ``ShellExit(127)``."""
    if argv:
        stderr.write(f"minishell: {argv[0]}: command not found\n")
    raise ShellExit(EXIT_NOT_FOUND)


def path_not_found(stderr: TextIO) -> None:
    """Report a missing ``PATH`` and raise ``ShellExit(127)``."""
    stderr.write("minishell: : No sush file or directory\n")
    raise ShellExit(EXIT_NOT_FOUND)