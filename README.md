# pingo

`pingo` is the execution side of a small POSIX-style shell. It takes commands that have already been split into words and redirections and carries them out:

- the builtins `echo`, `cd`, `pwd`, `export`, `unset`, `env` and `exit`
- the shell's environment and its separate export list
- input and output redirections (`<`, `>`, `>>`, `<<`)
- running one external command or a pipeline of commands, with bash-like exit statuses: 126, 127, and 128 plus the signal number

It runs on POSIX systems, because it uses `fork`, `execve` and pipes. It needs nothing beyond the standard library.

## Modules

| Module | What it holds |
| --- | --- |
| `pingo.textutils` | `split_fields` splits on a separator and drops empty fields. `parse_long_long` parses integers and clamps them to the signed 64-bit range. |
| `pingo.errors` | `ShellExit`, `command_not_found`, `path_not_found` |
| `pingo.command` | `TokenType`, `Command` (argv, files, redirections), `ShellState` |
| `pingo.environment` | `Environment` and `ExportList` |
| `pingo.export` | the `export` builtin: `export`, `export_arg`, `split_assignment`, `format_exports` |
| `pingo.simple_builtins` | `echo`, `print_env`, `pwd`, `unset`, `is_valid_unset_name` |
| `pingo.cd` | `cd`, `resolve_target`, `record_directories` |
| `pingo.exit_builtin` | `builtin_exit`, `is_numeric`, `normalize_exit_code` |
| `pingo.redirections` | `open_output`, `open_input`, `apply_single_redirection`, `apply_redirections` |
| `pingo.dispatch` | `is_builtin`, `run_builtin`, `status_from_wait` |
| `pingo.executor` | `execute`, `run_single`, `run_pipeline`, `find_executable`, `check_path_target` |

## Examples

Builtins write to the streams they are given and return an exit status:

```python
import io

from pingo.simple_builtins import echo

out = io.StringIO()
status = echo(["echo", "-nnn", "hello", "world"], out)
assert out.getvalue() == "hello world"
assert status == 0
```

`export` updates both the export list and the environment:

```python
import io

from pingo.environment import Environment, ExportList
from pingo.export import export

env = Environment.from_environ({"HOME": "/home/user"})
exports = ExportList.from_environ({"HOME": "/home/user"})
export(exports, env, ["export", "GREETING=hi"], io.StringIO(), io.StringIO())
assert env.get("GREETING") == "hi"
assert exports.get("GREETING") == "hi"
```

If `from_environ` is given an empty environment, it fills in defaults. The environment gets `PWD`, `PATH`, `_` and `SHLVL`. The export list gets `OLDPWD` (declared without a value), `PWD` and `SHLVL`.

`exit` raises `pingo.errors.ShellExit` when the shell should end. The exception carries the status:

```python
import io

from pingo.command import ShellState
from pingo.errors import ShellExit
from pingo.exit_builtin import builtin_exit

try:
    builtin_exit(ShellState(), ["exit", "300"], 1, io.StringIO())
except ShellExit as exc:
    assert exc.status == 44
```

The text helpers:

```python
from pingo.textutils import split_fields, parse_long_long

split_fields("/usr/bin::/bin", ":")      # ["/usr/bin", "/bin"]
parse_long_long("  -42")                 # -42
parse_long_long("99999999999999999999")  # 9223372036854775807
```

To run a parsed command line, build a `ShellState` and pass a list of `Command` objects to `pingo.executor.execute`:

- A lone builtin runs in the current process.
- Anything else runs in forked children.
- Standard input and output are restored afterwards.
- The resulting status is stored in `state.exit_status` and also returned.

## What it does not do

`pingo` does not read or parse command lines:

- It has no prompt or line editing.
- It has no tokenizer or quote handling.
- It does not expand `$` variables.
- It does not collect here-document bodies. `<<` expects an already-open file descriptor, passed as `heredoc_fd`.

`TokenType` lists token kinds, but the package does not produce tokens itself. There is also no command-line program: the package is used as a library.

## Tests

The tests use pytest. Install them with the `test` extra.