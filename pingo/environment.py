"""The shell's environment and its export list."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Union

from pingo.textutils import split_fields

DEFAULT_PATH = (
    "/usr/local/bin:/usr/bin:/bin:/usr/sbin:/sbin:"
    "/usr/local/munki:/Library/Apple/usr/bin"
)

EnvironSource = Union[Mapping[str, str], Iterable[str]]


def _current_directory() -> str:
    try:
        return os.getcwd()
    except OSError as exc:
        sys.stderr.write(f"getcwd: {exc.strerror}\n")
        return ""


def _environ_pairs(environ: EnvironSource) -> Iterator[tuple[str, str]]:
    """Yield ``(name, value)`` from ``NAME=VALUE`` entries.

    Each entry is split on ``=`` with empty fields dropped; the first field
    is the name and the second the value.  Entries with fewer than two
    fields are skipped.
    """
    if isinstance(environ, Mapping):
        entries: Iterable[str] = (f"{k}={v}" for k, v in environ.items())
    else:
        entries = environ
    for entry in entries:
        fields = split_fields(entry, "=")
        if len(fields) < 2:
            continue
        yield fields[0], fields[1]


def _is_empty(environ: EnvironSource) -> bool:
    if isinstance(environ, Mapping):
        return not environ
    return not list(environ)


class Environment:
    """Ordered ``NAME=VALUE`` variables passed to child processes."""

    def __init__(self, items: Iterable[tuple[str, str]] = ()) -> None:
        self._vars: dict[str, str] = {}
        for name, value in items:
            self._vars.setdefault(name, value)

    @classmethod
    def from_environ(cls, environ: EnvironSource) -> "Environment":
        """Build from an environment, or from defaults when it is empty."""
        if not isinstance(environ, Mapping):
            environ = list(environ)
        if _is_empty(environ):
            return cls(
                [
                    ("PWD", _current_directory()),
                    ("PATH", DEFAULT_PATH),
                    ("_", "/usr/bin/env"),
                    ("SHLVL", "1"),
                ]
            )
        return cls(_environ_pairs(environ))

    def get(self, name: str) -> str | None:
        """Return the value of ``name``, or ``None`` if it is not set."""
        return self._vars.get(name)

    def set(self, name: str, value: str) -> None:
        """Replace the value of ``name``, adding it at the end if missing."""
        self._vars[name] = value

    def append(self, name: str, value: str) -> None:
        """Append ``value`` to the value of ``name``, adding it if missing."""
        self._vars[name] = self._vars.get(name, "") + value

    def remove(self, name: str) -> None:
        """Remove ``name``; a missing name is ignored."""
        self._vars.pop(name, None)

    def items(self) -> list[tuple[str, str]]:
        """Return the variables as ``(name, value)`` pairs in order."""
        return list(self._vars.items())

    def to_environ(self) -> dict[str, str]:
        """Return a plain dictionary suitable for a child process."""
        return dict(self._vars)

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __len__(self) -> int:
        return len(self._vars)

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)


@dataclass
class _ExportEntry:
    name: str
    value: str | None


class ExportList:
    """Variables marked for export; a value of ``None`` means declared only.

    The list keeps insertion order and may hold a name more than once until
    :meth:`dedupe` is called.
    """

    def __init__(self, items: Iterable[tuple[str, str | None]] = ()) -> None:
        self._entries = [_ExportEntry(name, value) for name, value in items]

    @classmethod
    def from_environ(cls, environ: EnvironSource) -> "ExportList":
        """Build from an environment, or from defaults when it is empty."""
        if not isinstance(environ, Mapping):
            environ = list(environ)
        if _is_empty(environ):
            return cls(
                [
                    ("OLDPWD", None),
                    ("PWD", _current_directory()),
                    ("SHLVL", "1"),
                ]
            )
        return cls(_environ_pairs(environ))

    def _find(self, name: str) -> _ExportEntry | None:
        return next((e for e in self._entries if e.name == name), None)

    def get(self, name: str) -> str | None:
        """Return the value of the first ``name``, or ``None``."""
        entry = self._find(name)
        return entry.value if entry else None

    def declare(self, name: str) -> None:
        """Add ``name`` without a value unless it is already listed."""
        if self._find(name) is None:
            self._entries.append(_ExportEntry(name, None))

    def set(self, name: str, value: str | None) -> None:
        """Give ``name`` a value (``None`` becomes empty), adding it if missing."""
        value = "" if value is None else value
        entry = self._find(name)
        if entry is None:
            self._entries.append(_ExportEntry(name, value))
        else:
            entry.value = value

    def append(self, name: str, value: str) -> None:
        """Append ``value`` to the value of ``name``, adding it if missing."""
        entry = self._find(name)
        if entry is None:
            self._entries.append(_ExportEntry(name, value))
        else:
            entry.value = (entry.value or "") + value

    def remove(self, name: str) -> None:
        """Remove the first ``name``; a missing name is ignored."""
        entry = self._find(name)
        if entry is not None:
            self._entries.remove(entry)

    def dedupe(self) -> None:
        """Drop later entries whose name already appeared earlier."""
        seen: set[str] = set()
        kept = []
        for entry in self._entries:
            if entry.name not in seen:
                seen.add(entry.name)
                kept.append(entry)
        self._entries = kept

    def sort(self) -> None:
        """Order the entries by name."""
        self._entries.sort(key=lambda entry: entry.name)

    def items(self) -> list[tuple[str, str | None]]:
        """Return the entries as ``(name, value)`` pairs in order."""
        return [(entry.name, entry.value) for entry in self._entries]

    def __contains__(self, name: object) -> bool:
        return any(entry.name == name for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return (entry.name for entry in self._entries)