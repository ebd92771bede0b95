# minishell

The working parts of a small POSIX-style shell, as a Python library. It takes
commands that are already split into argument lists, and it can:

- run the builtins `echo`, `cd`, `pwd`, `export`, `unset`, `env` and `exit`;
- keep an ordered variable table with `export` and `unset` behaviour;
- look commands up on `PATH` and explain why one cannot run;
- open `<`, `>`, `>>` and here-document redirections;
- run a pipeline of child processes and report the last one's status.

Python 3.10 or later on a POSIX system. No third-party runtime dependencies.

## Modules

### `minishell.numbers`

Helpers for the `exit` builtin.

- `atoi(text)` parses a leading integer the way C `atoi` does on a 32-bit
  `int`. It skips leading whitespace and accepts one sign, stops at the first
  non-digit, and wraps values that do not fit.
- `is_numeric(text)` checks for optional whitespace, an optional sign, then
  digits only.
- `fits_long(text)` checks that the text is numeric and inside the signed
  64-bit range.
- `exit_code(text)` gives the status, `0..255`, that `exit text` would
  produce. It raises `ValueError` when the argument is not acceptable.

### `minishell.environment`

- `Environment` is an ordered table of `EnvVar` objects keyed by name. It has
  `from_strings(entries)`, `find`, `get`, `set`, `unset`, `export(arg)`,
  `to_envp()`, `names()`, `len()`, iteration and `in`.
- `EnvVar` holds `name`, `value` (which may be `None`) and `flag`. Its `entry`
  property gives the `NAME=value` form.
- `VarFlag` says how a variable appears in listings:
  - `EXPORTED` is an ordinary variable.
  - `EMPTY` is listed by `env` as `NAME=` even without a value.
  - `DECLARED` is a name given to `export` with no value.
  - `HIDDEN` is used for `_`, which `export` never lists.
- `is_valid_identifier(arg)` checks the part of an `export` argument before
  `=`.

`Environment.export("NAME")` declares a new variable with no value and leaves
an existing one alone. `Environment.export("NAME=value")` creates or updates
the variable. An invalid identifier raises `ValueError`.

### `minishell.builtins`

- `ShellState` holds `env`, `current_dir` and the last `status`.
- `is_builtin(argv)` tells whether `argv[0]` is one of the seven builtins.
- `run_builtin(argv, state, out, err)` dispatches to the builtin, records the
  status in `state.status` and returns it. It raises `ValueError` for a
  command that is not a builtin.
- Each builtin can also be called directly: `echo`, `cd`, `pwd`, `export`,
  `unset`, `env` and `exit_builtin`. `format_export(env)` returns the listing
  that `export` prints when it has no arguments.

How the builtins behave:

- **echo** accepts any number of leading `-n`, `-nn`, … options. Any of them
  suppresses the trailing newline.
- **cd**:
  - With no argument, or an argument starting with `~`, it goes to the
    process's `HOME`. With no argument, it reports `HOME not set` when `HOME`
    is missing from the process environment or from the shell's table.
  - Otherwise it checks the target first and reports "No such file or
    directory", "Permission denied" or "Not a directory".
  - On success it updates `PWD` and `OLDPWD`, when they exist, and
    `state.current_dir`.
  - More than one argument gives "too many arguments" and status 1.
- **pwd** prints `state.current_dir`.
- **export**:
  - With no arguments it prints every variable except `HIDDEN` ones, sorted
    by name, as `declare -x NAME="value"`. Declared names without a value are
    printed as `declare -x NAME`.
  - With arguments it exports each valid one and reports the invalid ones.
    Its status is always 0.
- **unset** removes each named variable.
- **env**:
  - It prints `NAME=value` for every variable that has a value.
  - An argument gives "No such file or directory" and status 1, and so does
    an empty table.
- **exit**:
  - It always prints `exit`, then ends the shell by raising `ShellExit`,
    whose `status` attribute holds the exit status.
  - A non-numeric or out-of-range argument gives "numeric argument required"
    and status 2.
  - A numeric first argument followed by more arguments gives "too many
    arguments". The builtin then returns 1 and the shell keeps running.

All output goes to the `out` and `err` text streams that are passed in, so it
is easy to capture:

```python
import io
from minishell.builtins import ShellExit, ShellState, run_builtin
from minishell.environment import Environment

state = ShellState(env=Environment.from_strings(["HOME=/tmp", "USER=demo"]))
out, err = io.StringIO(), io.StringIO()

run_builtin(["echo", "-n", "hello", "world"], state, out, err)
out.getvalue()                       # "hello world"

run_builtin(["export", "EDITOR=vi"], state, out, err)
state.env.get("EDITOR")              # "vi"

try:
    run_builtin(["exit", "300"], state, out, err)
except ShellExit as done:
    done.status                      # 44
```

### `minishell.pathsearch`

- `split_path(entry)` splits a `PATH=dir:dir` entry, or a bare value, into
  directories.
- `find_in_path(name, directories)` returns the first executable `dir/name`,
  or `None`.
- `resolve_command(name, envp)` returns the path to run:
  - A name starting with `/` or `.` is returned unchanged.
  - Otherwise the name is looked up on the `PATH=` entry of `envp`.
  - If nothing is found, it raises `CommandError` with status 127: "command
    not found", or "No such file or directory" when there is no `PATH` or
    the name contains `/`.
- `describe_exec_failure(arg)` returns the `CommandError` for a program that
  could not be started. That is "Is a directory" or "Permission denied" with
  status 126, or one of the status-127 messages.

### `minishell.redirections`

- `RedirKind` is `INPUT` (`<`), `TRUNC` (`>`), `APPEND` (`>>`) or `HEREDOC`
  (`<<`).
- `Redirection(kind, file)` is one redirection. For a here-document, `file`
  is the delimiter.
- `Section` is one pipeline command. It holds `cmd`, `files`, `fd_in`,
  `fd_out`, `failed` and `pid`. `Section.close()` closes its descriptors.
- `read_heredoc(delimiter, lines, err)` collects lines up to the delimiter
  and returns a readable file descriptor holding them. It warns on `err` if
  the lines run out first.
- `open_redirections(sections, state, err, heredoc_input=None)` opens every
  redirection in order:
  - A later redirection in the same direction replaces an earlier one.
  - When a file cannot be opened, an error is written, the section is marked
    `failed` and its remaining redirections are skipped.
  - Here-documents read from `heredoc_input`, or from the terminal with a `>`
    prompt when it is `None`.
  - It returns `False` and sets status 130 if a here-document is interrupted
    with Ctrl-C.

### `minishell.execution`

- `execute(sections, state, out, err)` runs a single builtin inside the
  shell, through `run_builtin_section`, so that it can change the shell's
  state. If that builtin is `exit`, `ShellExit` propagates. Anything else
  goes to `run_pipeline`.
- `run_builtin_section(section, state, out, err)` honours the section's
  output redirection and closes its descriptors.
- `run_pipeline(sections, state, err)`:
  - It connects neighbouring sections with pipes and starts each command as a
    child process.
  - A builtin inside a pipeline runs on a copy of the state, so its changes do
    not last.
  - It waits for all of them and returns the status of the last one. For a
    process killed by a signal, that status is the signal number.
  - Child processes write to the real standard output and error descriptors,
    not to Python stream objects.

```python
import os, sys
from minishell.builtins import ShellState
from minishell.environment import Environment
from minishell.execution import execute
from minishell.redirections import RedirKind, Redirection, Section, open_redirections

env = Environment.from_strings(f"{k}={v}" for k, v in os.environ.items())
state = ShellState(env=env)
sections = [
    Section(cmd=["ls", "-l"]),
    Section(cmd=["wc", "-l"], files=[Redirection(RedirKind.TRUNC, "count.txt")]),
]
if open_redirections(sections, state, sys.stderr):
    status = execute(sections, state, sys.stdout, sys.stderr)
```

## What this package does not do

There is no command to run and no interactive prompt loop. The package does
not read, tokenize or parse command lines. It also does not expand variables,
quotes or wildcards, and it installs no signal handling of its own. The
caller has to build the `Section` lists, the argument lists and the
`Redirection` objects.