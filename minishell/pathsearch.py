"""Finding the program a command names, and explaining why it cannot run."""

import os


class CommandError(Exception):
    """A command that cannot be run, with the shell status it leaves behind."""

    def __init__(self, message, status):
        super().__init__(message)
        self.message = message
        self.status = status


def split_path(entry):
    """Split a ``PATH=dir:dir`` entry (or a bare PATH value) into directories."""
    value = entry[len("PATH="):] if entry.startswith("PATH=") else entry
    return value.split(":")


def find_in_path(name, directories):
    """Return the first ``dir/name`` that exists and is executable, or None."""
    for directory in directories:
        candidate = f"{directory}/{name}"
        if os.access(candidate, os.F_OK | os.X_OK):
            return candidate
    return None


def _no_such_file(name):
    return CommandError(f"minishell: {name}: No such file or directory", 127)


def resolve_command(name, envp):
    """Return the path to execute for ``name`` using the PATH entry of ``envp``.

    Names starting with ``/`` or ``.`` are used as they are. Raises
    CommandError (status 127) when nothing suitable is found.
    """
    if name.startswith(("/", ".")):
        return name
    entry = next((item for item in envp if item.startswith("PATH=")), None)
    if entry is None:
        raise _no_such_file(name)
    path = find_in_path(name, split_path(entry))
    if path is None:
        if "/" in name:
            raise _no_such_file(name)
        raise CommandError(f"{name}: command not found", 127)
    return path


def describe_exec_failure(arg):
    """Return the CommandError explaining why ``arg`` could not be executed."""
    if os.path.isdir(arg):
        return CommandError(f"minishell: {arg}: Is a directory", 126)
    if os.path.exists(arg):
        return CommandError(f"minishell: {arg}: Permission denied", 126)
    if "/" not in arg:
        return CommandError(f"{arg}: command not found", 127)
    return _no_such_file(arg)