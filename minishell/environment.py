"""The shell's variable table: initial environment, export and unset."""

from dataclasses import dataclass
from enum import Enum
from string import ascii_letters, digits

_NAME_START = ascii_letters + "_"
_NAME_CHARS = ascii_letters + digits + "_"


class VarFlag(Enum):
    """How a variable shows up in ``env`` and ``export`` listings."""

    EXPORTED = "v"
    EMPTY = "V"
    DECLARED = "W"
    HIDDEN = "X"


@dataclass
class EnvVar:
    """One shell variable."""

    name: str
    value: str | None = None
    flag: VarFlag = VarFlag.EXPORTED

    @property
    def entry(self):
        """The ``NAME=value`` form handed to child processes."""
        return f"{self.name}={self.value or ''}"


def is_valid_identifier(arg):
    """Return True if ``arg`` is an acceptable ``export`` argument.

    The part before the first ``=`` must start with a letter or underscore
    and contain only letters, digits and underscores.
    """
    name = arg.partition("=")[0]
    if not name or name[0] not in _NAME_START:
        return False
    return all(ch in _NAME_CHARS for ch in name)


class Environment:
    """An ordered table of shell variables keyed by name."""

    def __init__(self, variables=()):
        self._vars = {}
        for var in variables:
            self._vars[var.name] = var

    @classmethod
    def from_strings(cls, entries):
        """Build the table from ``NAME=value`` strings such as ``os.environ`` items."""
        env = cls()
        for entry in entries:
            name, _, value = entry.partition("=")
            flag = VarFlag.HIDDEN if name == "_" else VarFlag.EXPORTED
            env._vars[name] = EnvVar(name, value, flag)
        return env

    def find(self, name):
        """Return the variable called ``name``, or None."""
        return self._vars.get(name)

    def get(self, name):
        """Return the value of ``name``, or None if unset or valueless."""
        var = self._vars.get(name)
        return var.value if var is not None else None

    def set(self, name, value):
        """Give ``name`` a value, keeping its flag; new names are exported."""
        var = self._vars.get(name)
        if var is None:
            var = EnvVar(name, value, VarFlag.EXPORTED)
            self._vars[name] = var
        else:
            var.value = value
        return var

    def unset(self, name):
        """Remove ``name`` if present."""
        self._vars.pop(name, None)

    def export(self, arg):
        """Apply one ``export`` argument and return the affected variable.

        ``NAME`` declares a variable without a value, ``NAME=value`` sets it.
        An existing variable is left alone unless the argument has ``=``.
        Raises ValueError for an invalid identifier.
        """
        if not is_valid_identifier(arg):
            raise ValueError(f"export: {arg}: not a valid identifier")
        name, sep, value = arg.partition("=")
        existing = self._vars.get(name)
        if existing is not None:
            if sep:
                existing.value = value
                existing.flag = VarFlag.EXPORTED
            return existing
        if sep:
            var = EnvVar(name, value, VarFlag.EXPORTED)
        else:
            var = EnvVar(name, None, VarFlag.DECLARED)
        self._vars[name] = var
        return var

    def to_envp(self):
        """Return every variable as a ``NAME=value`` string, in table order."""
        return [var.entry for var in self._vars.values()]

    def names(self):
        """Return the variable names in table order."""
        return list(self._vars)

    def __len__(self):
        return len(self._vars)

    def __iter__(self):
        return iter(list(self._vars.values()))

    def __contains__(self, name):
        return name in self._vars