"""The shell's builtin commands: echo, cd, pwd, export, unset, env and exit."""

import os
from dataclasses import dataclass, field

from minishell.environment import Environment, VarFlag, is_valid_identifier
from minishell.numbers import exit_code, fits_long

BUILTINS = frozenset({"echo", "cd", "pwd", "export", "unset", "env", "exit"})

_GETCWD_ERROR = (
    "cd: error retrieving current directory: getcwd: cannot "
    "access parent directories: No such file or directory\n"
)


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with ``status``."""

    def __init__(self, status):
        super().__init__(status)
        self.status = status


@dataclass
class ShellState:
    """What the builtins read and change: variables, working directory, last status."""

    env: Environment = field(default_factory=Environment)
    current_dir: str = field(default_factory=os.getcwd)
    status: int = 0


def is_builtin(argv):
    """Return True if ``argv`` names a builtin command."""
    return bool(argv) and argv[0] in BUILTINS


def run_builtin(argv, state, out, err):
    """Run the builtin named by ``argv[0]``, record and return its status.

    Raises ShellExit when the builtin is ``exit`` and the shell must stop,
    and ValueError when ``argv[0]`` is not a builtin.
    """
    name = argv[0] if argv else ""
    if name == "echo":
        status = echo(argv, out)
    elif name == "cd":
        status = cd(argv, state, err)
    elif name == "pwd":
        status = pwd(state, out)
    elif name == "export":
        status = export(argv, state, out, err)
    elif name == "unset":
        status = unset(argv, state)
    elif name == "env":
        status = env(argv, state, out, err)
    elif name == "exit":
        status = exit_builtin(argv, state, out, err)
    else:
        raise ValueError(f"{name}: not a builtin")
    state.status = status
    return status


def _is_n_option(word):
    return word.startswith("-n") and set(word[2:]) <= {"n"}


def echo(argv, out):
    """Write the arguments separated by spaces; leading ``-n`` options drop the newline."""
    words = argv[1:]
    skip = 0
    for word in words:
        if not _is_n_option(word):
            break
        skip += 1
    out.write(" ".join(words[skip:]))
    if skip == 0:
        out.write("\n")
    return 0


def _cd_error(argv, reason, err):
    err.write(f"minishell : {argv[0]}: {argv[1]}: {reason}\n")
    return 1


def _check_target(argv, err):
    """Return 0 if ``argv[1]`` may be entered, else report why and return 1."""
    target = argv[1]
    if target in (".", ".."):
        return 0
    if not os.path.exists(target):
        return _cd_error(argv, "No such file or directory", err)
    if os.path.isdir(target):
        if not os.access(target, os.X_OK):
            return _cd_error(argv, "Permission denied", err)
        return 0
    return _cd_error(argv, "Not a directory", err)


def _update_pwd(argv, state, old, err):
    try:
        new = os.getcwd()
    except OSError:
        if len(argv) > 1 and argv[1][1:2] == ".":
            err.write(_GETCWD_ERROR)
            return 0
        new = ""
    previous = state.env.find("OLDPWD")
    if previous is not None:
        previous.value = old
    current = state.env.find("PWD")
    if current is not None:
        current.value = new
    state.current_dir = new
    return 0


def _cd_home(argv, state, old, err):
    home = os.environ.get("HOME")
    if len(argv) < 2 and (home is None or "HOME" not in state.env):
        err.write("minishell: cd: HOME not set\n")
        return 1
    try:
        if home is None:
            raise FileNotFoundError(2, "Bad address")
        os.chdir(home)
    except OSError as exc:
        err.write(f"chdir error: : {exc.strerror}\n")
        return 1
    return _update_pwd(argv, state, old, err)


def cd(argv, state, err):
    """Change the working directory and keep PWD and OLDPWD in step."""
    if len(argv) > 2:
        err.write(f"minishell : {argv[0]}: too many arguments\n")
        return 1
    old = state.current_dir
    if len(argv) < 2 or argv[1].startswith("~"):
        return _cd_home(argv, state, old, err)
    if _check_target(argv, err):
        return 1
    try:
        os.chdir(argv[1])
    except OSError:
        err.write(_GETCWD_ERROR)
        return 0
    return _update_pwd(argv, state, old, err)


def pwd(state, out):
    """Write the shell's current directory."""
    out.write(f"{state.current_dir}\n")
    return 0


def format_export(env):
    """Return the ``export`` listing: visible variables sorted by name."""
    lines = []
    visible = (var for var in env if var.flag is not VarFlag.HIDDEN)
    for var in sorted(visible, key=lambda v: v.name.encode()):
        if var.flag is VarFlag.DECLARED:
            lines.append(f"declare -x {var.name}\n")
        else:
            lines.append(f'declare -x {var.name}="{var.value or ""}"\n')
    return "".join(lines)


def export(argv, state, out, err):
    """List variables, or declare and set each argument; always returns 0."""
    if len(argv) < 2:
        out.write(format_export(state.env))
        return 0
    for arg in argv[1:]:
        if not is_valid_identifier(arg):
            err.write(f"minishell : export: {arg}: not a valid identifier\n")
            continue
        state.env.export(arg)
    return 0


def unset(argv, state):
    """Remove every named variable."""
    for name in argv[1:]:
        state.env.unset(name)
    return 0


def env(argv, state, out, err):
    """Write the variables that have a value as ``NAME=value`` lines."""
    if len(argv) > 1:
        err.write(f"env: {argv[1]}: No such file or directory\n")
        return 1
    if not len(state.env):
        err.write("env: No such file or directory\n")
        return 1
    for var in state.env:
        if var.value is not None:
            out.write(f"{var.name}={var.value}\n")
        elif var.flag is VarFlag.EMPTY:
            out.write(f"{var.name}=\n")
    return 0


def exit_builtin(argv, state, out, err):
    """Leave the shell by raising ShellExit, or return 1 on too many arguments."""
    out.write("exit\n")
    if len(argv) < 2 or (argv[1].startswith("0") and len(argv) == 2):
        raise ShellExit(0)
    if not fits_long(argv[1]):
        err.write(f"minishell : exit: {argv[1]}: numeric argument required\n")
        raise ShellExit(2)
    if len(argv) > 2:
        err.write("minishell : exit: too many arguments\n")
        state.status = 1
        return 1
    raise ShellExit(exit_code(argv[1]))