"""Running parsed pipelines: builtins in the shell, everything else as child processes."""

import copy
import io
import os
import subprocess
import sys
import threading

from minishell.builtins import ShellExit, is_builtin, run_builtin
from minishell.pathsearch import CommandError, describe_exec_failure, resolve_command


def execute(sections, state, out, err):
    """Run a pipeline whose redirections are already open and return its status.

    A lone builtin runs inside the shell so that it can change the shell's
    state; ``ShellExit`` from ``exit`` then propagates. Anything else runs as
    a pipeline.
    """
    sections = list(sections)
    if len(sections) == 1 and sections[0].cmd and is_builtin(sections[0].cmd):
        return run_builtin_section(sections[0], state, out, err)
    return run_pipeline(sections, state, err)


def run_builtin_section(section, state, out, err):
    """Run a builtin in the shell itself, honouring its output redirection."""
    try:
        if section.failed:
            return state.status
        redirect = section.fd_out is not None and section.cmd[0] != "exit"
        target = io.StringIO() if redirect else out
        try:
            status = run_builtin(section.cmd, state, target, err)
        finally:
            if redirect:
                _write_all(section.fd_out, target.getvalue().encode())
        return status
    finally:
        section.close()


def run_pipeline(sections, state, err):
    """Start every section of a pipeline, wait for them and return the last status.

    Builtins inside a pipeline work on a copy of the shell state, so their
    changes do not outlive the pipeline, just as if they ran in a child.
    """
    sections = list(sections)
    _connect_pipes(sections)
    envp = state.env.to_envp()
    results = []
    writers = []
    try:
        for index, section in enumerate(sections):
            following = sections[index + 1] if index + 1 < len(sections) else None
            if section.cmd:
                results.append(
                    _launch(section, index, following, state, envp, err, writers)
                )
            section.close()
    finally:
        for section in sections:
            section.close()
    statuses = [_wait(result) for result in results]
    for writer in writers:
        writer.join()
    if statuses:
        state.status = statuses[-1]
    return state.status


def _connect_pipes(sections):
    """Join neighbouring sections whose output and input are not redirected."""
    for current, following in zip(sections, sections[1:]):
        if current.failed or following.failed:
            continue
        if current.fd_out is None and following.fd_in is None:
            read_end, write_end = os.pipe()
            current.fd_out = write_end
            following.fd_in = read_end


def _launch(section, index, following, state, envp, err, writers):
    """Start one section; return a running process or a finished status."""
    if section.failed:
        return 1
    name = section.cmd[0]
    opened = []
    stdin = section.fd_in
    stdout = section.fd_out
    if stdin is None and index > 0:
        stdin = os.open(os.devnull, os.O_RDONLY)
        opened.append(stdin)
    if stdout is None and following is not None and name == "cat":
        read_end, write_end = os.pipe()
        os.close(read_end)
        stdout = write_end
        opened.append(stdout)
    elif (stdout is None and following is not None) or name == "exit":
        stdout = os.open(os.devnull, os.O_WRONLY)
        opened.append(stdout)
    try:
        if is_builtin(section.cmd):
            return _run_detached_builtin(section.cmd, stdout, state, err, writers)
        return _spawn(section.cmd, stdin, stdout, envp, err)
    finally:
        for fd in opened:
            os.close(fd)


def _run_detached_builtin(argv, stdout, state, err, writers):
    """Run a builtin as a pipeline stage without touching the shell's state."""
    buffer = io.StringIO()
    child_state = copy.deepcopy(state)
    cwd = os.getcwd()
    try:
        status = run_builtin(argv, child_state, buffer, err)
    except ShellExit as exc:
        status = exc.status
    finally:
        try:
            os.chdir(cwd)
        except OSError:
            pass
    data = buffer.getvalue()
    if stdout is None:
        sys.stdout.write(data)
        sys.stdout.flush()
    else:
        writer = threading.Thread(
            target=_write_and_close, args=(os.dup(stdout), data.encode()), daemon=True
        )
        writer.start()
        writers.append(writer)
    return status


def _spawn(argv, stdin, stdout, envp, err):
    try:
        path = resolve_command(argv[0], envp)
    except CommandError as exc:
        err.write(f"{exc.message}\n")
        return exc.status
    try:
        return subprocess.Popen(
            argv,
            executable=path,
            stdin=stdin,
            stdout=stdout,
            env=_env_dict(envp),
            close_fds=True,
        )
    except OSError:
        failure = describe_exec_failure(argv[0])
        err.write(f"{failure.message}\n")
        return failure.status


def _env_dict(envp):
    return dict(entry.split("=", 1) for entry in envp)


def _wait(result):
    if isinstance(result, int):
        return result
    code = result.wait()
    return code if code >= 0 else -code


def _write_all(fd, data):
    view = memoryview(data)
    try:
        while view:
            written = os.write(fd, view)
            view = view[written:]
    except BrokenPipeError:
        pass


def _write_and_close(fd, data):
    try:
        _write_all(fd, data)
    finally:
        os.close(fd)