"""Builtins, a variable table, command lookup, redirections and pipeline execution for a small shell."""

__version__ = "0.1.0"

__all__ = [
    "builtins",
    "environment",
    "execution",
    "numbers",
    "pathsearch",
    "redirections",
]