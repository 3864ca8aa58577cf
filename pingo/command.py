"""Parsed commands, token kinds and the state shared across one shell session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class TokenType(IntEnum):
    """Kinds of token produced by the command-line tokenizer."""

    WORD = 0
    PIPE = 1
    APPEND = 2
    HEREDOC = 3
    REDIRECT_IN = 4
    REDIRECT_OUT = 5
    OPEN_PAREN = 6
    CLOSE_PAREN = 7
    FILE = 8
    IN_FILE = 9
    OUT_FILE = 10
    OR = 11
    APPEND_FILE = 12
    HEREDOC_FILE = 13
    ASSIGN = 14
    OPTION = 15
    SPACE = 16
    DQUOTE = 17
    SQUOTE = 18
    CMD = 19


@dataclass
class Command:
    """One simple command of a pipeline: its words and its redirections.

    ``redirections`` holds operators such as ``">"`` or ``"<<"``; ``files``
    holds the matching targets at the same positions.
    """

    argv: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    redirections: list[str] = field(default_factory=list)

    def redirect_pairs(self) -> list[tuple[str, str]]:
        """Return ``(operator, file)`` pairs, stopping at the shorter list."""
        return list(zip(self.redirections, self.files))


@dataclass
class ShellState:
    """Mutable state of a running shell.

    ``env`` and ``exports`` hold the environment and the export list;
    ``redirect_failed`` is set when an input redirection could not be opened,
    which forces the next wait status to be reported as a failure.
    """

    env: Any = None
    exports: Any = None
    envp: dict[str, str] = field(default_factory=dict)
    exit_status: int = 0
    redirect_failed: bool = False