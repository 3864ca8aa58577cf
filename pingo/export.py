"""The ``export`` builtin: parsing assignments and listing exported names."""

from __future__ import annotations

from typing import Sequence, TextIO

from pingo.environment import Environment, ExportList


def _is_alpha(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def _is_alnum(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def _report_invalid(text: str, stderr: TextIO) -> None:
    stderr.write(f"minishell: export: `{text}': not a valid identifier\n")


def split_assignment(arg: str) -> tuple[str, str | None]:
    """Split ``NAME=VALUE`` into the text before the first ``=`` and the value.

    The value is ``None`` when there is no ``=`` or nothing follows it.
    """
    name, _, value = arg.partition("=")
    return name, value or None


def _validated_name(raw: str, stderr: TextIO) -> str | None:
    """Return ``raw`` as a variable name, dropping one trailing ``+``.

    Names hold ASCII letters and digits only; anything else is reported
    and gives ``None``.
    """
    if not raw:
        return None
    last = len(raw) - 1
    for pos, ch in enumerate(raw):
        if ch == "+" and pos != last:
            _report_invalid(raw, stderr)
            return None
        if not _is_alnum(ch):
            if pos > 0 and _is_alnum(raw[pos - 1]) and ch == "+" and pos == last:
                return raw[:pos]
            _report_invalid(raw, stderr)
            return None
    return raw


def _is_append(arg: str) -> bool:
    """Tell whether ``arg`` has the form ``NAME+=...``."""
    end = next((i for i, ch in enumerate(arg) if ch in "=+"), len(arg))
    return arg[end : end + 2] == "+="


def export_arg(
    exports: ExportList, env: Environment, arg: str, stderr: TextIO
) -> bool:
    """Apply one ``export`` argument; return ``False`` if it was rejected.

    ``NAME`` declares the name, ``NAME=VALUE`` sets it in both lists and
    ``NAME+=VALUE`` appends to its current value.
    """
    if not arg or not _is_alpha(arg[0]):
        _report_invalid(arg, stderr)
        return False
    raw_name, value = split_assignment(arg)
    name = _validated_name(raw_name, stderr)
    if name is None:
        return False
    text = value or ""
    if _is_append(arg):
        if name in exports:
            exports.append(name, text)
        else:
            exports.set(name, text)
        if name in env:
            env.append(name, text)
        elif len(env):
            env.set(name, text)
    elif "=" in arg:
        exports.set(name, text)
        # An empty environment is never extended by export.
        if len(env):
            env.set(name, text)
    else:
        exports.declare(name)
    return True


def format_exports(exports: ExportList) -> str:
    """Render the export list as ``declare -x`` lines, skipping ``_``."""
    lines = []
    for name, value in exports.items():
        if name == "_":
            continue
        if value is None:
            lines.append(f"declare -x {name}\n")
        else:
            lines.append(f'declare -x {name}="{value}"\n')
    return "".join(lines)


def export(
    exports: ExportList,
    env: Environment,
    args: Sequence[str],
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Run ``export`` with ``args`` (``args[0]`` is the command name).

    Returns 1 once the list has been processed, and 0 when the only
    argument was rejected or the export list is empty.
    """
    if len(args) > 1:
        results = [export_arg(exports, env, arg, stderr) for arg in args[1:]]
        if len(args) == 2 and not results[0]:
            return 0
    if not len(exports):
        return 0
    exports.dedupe()
    exports.sort()
    if len(args) == 1 and args[0] == "export":
        stdout.write(format_exports(exports))
    return 1