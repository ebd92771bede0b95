"""Opening the files and here-documents a pipeline's sections redirect to."""

import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum


class RedirKind(Enum):
    """The kind of a redirection operator."""

    INPUT = "<"
    TRUNC = ">"
    APPEND = ">>"
    HEREDOC = "<<"


@dataclass
class Redirection:
    """One redirection: its kind and its file name or here-document delimiter."""

    kind: RedirKind
    file: str


@dataclass
class Section:
    """One command of a pipeline with its redirections and open descriptors."""

    cmd: list | None = None
    files: list = field(default_factory=list)
    fd_in: int | None = None
    fd_out: int | None = None
    failed: bool = False
    pid: int | None = None

    def close(self):
        """Close any descriptors the section holds."""
        for fd in (self.fd_in, self.fd_out):
            _close_fd(fd)
        self.fd_in = None
        self.fd_out = None


def _close_fd(fd):
    if fd is not None:
        try:
            os.close(fd)
        except OSError:
            pass


def _prompt_lines():
    while True:
        try:
            yield input(">")
        except EOFError:
            return


def read_heredoc(delimiter, lines, err):
    """Collect lines up to ``delimiter`` and return a readable descriptor on them.

    When ``lines`` runs out first, a warning is written to ``err`` and what
    was read so far is used.
    """
    body = []
    for line in lines:
        if line.endswith("\n"):
            line = line[:-1]
        if line == delimiter:
            break
        body.append(line + "\n")
    else:
        err.write(
            "bash: warning: here-document delimited by end-of-file "
            f"(wanted `{delimiter}')\n"
        )
    with tempfile.TemporaryFile() as handle:
        handle.write("".join(body).encode())
        handle.flush()
        handle.seek(0)
        return os.dup(handle.fileno())


def _permission_denied(name, state, err):
    err.write(f"minishell : {name}: Permission denied\n")
    state.status = 1


def _open_file(path, flags, state, err):
    try:
        return os.open(path, flags, 0o644)
    except OSError:
        err.write(f"minishell: {path}: No such file or directory\n")
        state.status = 127
        return None


def _open_one(redir, state, err, lines):
    name = redir.file
    if redir.kind is RedirKind.INPUT:
        if os.path.exists(name) and not os.access(name, os.R_OK):
            _permission_denied(name, state, err)
            return None
        return _open_file(name, os.O_RDONLY, state, err)
    if redir.kind is RedirKind.TRUNC:
        if os.path.exists(name) and not os.access(name, os.W_OK):
            _permission_denied(name, state, err)
            return None
        return _open_file(name, os.O_CREAT | os.O_TRUNC | os.O_WRONLY, state, err)
    if redir.kind is RedirKind.APPEND:
        return _open_file(name, os.O_CREAT | os.O_APPEND | os.O_WRONLY, state, err)
    return read_heredoc(name, lines, err)


def open_redirections(sections, state, err, heredoc_input=None):
    """Open every section's redirections in order.

    A later redirection of the same direction replaces an earlier one. A
    section whose file cannot be opened is marked ``failed`` and its remaining
    redirections are skipped. Here-documents read from ``heredoc_input`` (an
    iterable of lines), or from the terminal when it is None.

    Returns False, with status 130, if a here-document is interrupted.
    """
    lines = _prompt_lines() if heredoc_input is None else iter(heredoc_input)
    for section in sections:
        for redir in section.files:
            reads = redir.kind in (RedirKind.INPUT, RedirKind.HEREDOC)
            if reads:
                _close_fd(section.fd_in)
                section.fd_in = None
            else:
                _close_fd(section.fd_out)
                section.fd_out = None
            try:
                fd = _open_one(redir, state, err, lines)
            except KeyboardInterrupt:
                state.status = 130
                return False
            if fd is None:
                section.failed = True
                break
            if reads:
                section.fd_in = fd
            else:
                section.fd_out = fd
    return True