import io
import os
import sys

import pytest

from minishell.builtins import ShellExit, ShellState
from minishell.environment import Environment
from minishell.execution import execute, run_builtin_section, run_pipeline
from minishell.redirections import Section


def _state(entries=("PATH=/usr/bin:/bin",)):
    return ShellState(env=Environment.from_strings(entries), current_dir=os.getcwd())


def _out_fd(path):
    return os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)


def _devnull():
    return os.open(os.devnull, os.O_RDONLY)


def _python(code):
    return [sys.executable, "-c", code]


def test_single_builtin_writes_to_out():
    out, err = io.StringIO(), io.StringIO()
    state = _state()
    status = execute([Section(cmd=["echo", "hi"])], state, out, err)
    assert status == 0
    assert out.getvalue() == "hi\n"
    assert state.status == 0


def test_builtin_output_redirected_to_file(tmp_path):
    target = tmp_path / "out.txt"
    section = Section(cmd=["echo", "-n", "hello"], fd_out=_out_fd(target))
    out = io.StringIO()
    status = run_builtin_section(section, _state(), out, io.StringIO())
    assert status == 0
    assert target.read_text() == "hello"
    assert out.getvalue() == ""
    assert section.fd_out is None


def test_failed_builtin_section_keeps_status():
    state = _state()
    state.status = 127
    status = execute([Section(cmd=["echo", "x"], failed=True)], state, io.StringIO(), io.StringIO())
    assert status == 127


def test_single_exit_raises():
    out = io.StringIO()
    with pytest.raises(ShellExit) as info:
        execute([Section(cmd=["exit", "7"])], _state(), out, io.StringIO())
    assert info.value.status == 7
    assert out.getvalue() == "exit\n"


def test_exit_with_too_many_arguments_returns_one():
    err = io.StringIO()
    status = execute([Section(cmd=["exit", "1", "2"])], _state(), io.StringIO(), err)
    assert status == 1
    assert "too many arguments" in err.getvalue()


def test_single_export_changes_state():
    state = _state()
    execute([Section(cmd=["export", "FOO=bar"])], state, io.StringIO(), io.StringIO())
    assert state.env.get("FOO") == "bar"


def test_export_inside_pipeline_does_not_persist():
    state = _state()
    sections = [Section(cmd=["export", "FOO=bar"]), Section(cmd=_python("pass"))]
    status = run_pipeline(sections, state, io.StringIO())
    assert status == 0
    assert "FOO" not in state.env


def test_external_command_output_to_file(tmp_path):
    target = tmp_path / "out.txt"
    section = Section(cmd=_python("print('x')"), fd_in=_devnull(), fd_out=_out_fd(target))
    status = execute([section], _state(), io.StringIO(), io.StringIO())
    assert status == 0
    assert target.read_text() == "x\n"


def test_two_process_pipeline(tmp_path):
    target = tmp_path / "out.txt"
    sections = [
        Section(cmd=_python("print('abc')"), fd_in=_devnull()),
        Section(cmd=_python("import sys; sys.stdout.write(sys.stdin.read().upper())"),
                fd_out=_out_fd(target)),
    ]
    status = run_pipeline(sections, _state(), io.StringIO())
    assert status == 0
    assert target.read_text() == "ABC\n"


def test_builtin_feeds_external_command(tmp_path):
    target = tmp_path / "out.txt"
    sections = [
        Section(cmd=["echo", "hello"]),
        Section(cmd=_python("import sys; sys.stdout.write(sys.stdin.read().upper())"),
                fd_out=_out_fd(target)),
    ]
    status = execute(sections, _state(), io.StringIO(), io.StringIO())
    assert status == 0
    assert target.read_text() == "HELLO\n"


def test_last_exit_status_wins():
    sections = [
        Section(cmd=_python("import sys; sys.exit(3)"), fd_in=_devnull()),
        Section(cmd=_python("import sys; sys.exit(4)")),
    ]
    state = _state()
    assert run_pipeline(sections, state, io.StringIO()) == 4
    assert state.status == 4


def test_exit_inside_pipeline_does_not_raise():
    sections = [Section(cmd=_python("pass"), fd_in=_devnull()), Section(cmd=["exit", "5"])]
    assert run_pipeline(sections, _state(), io.StringIO()) == 5


def test_cd_inside_pipeline_leaves_cwd(tmp_path):
    before = os.getcwd()
    state = _state()
    sections = [Section(cmd=["cd", str(tmp_path)]), Section(cmd=_python("pass"))]
    run_pipeline(sections, state, io.StringIO())
    assert os.getcwd() == before
    assert state.current_dir == before


def test_command_not_found(tmp_path):
    err = io.StringIO()
    state = _state((f"PATH={tmp_path}",))
    status = execute([Section(cmd=["nosuchcmd"], fd_in=_devnull())], state, io.StringIO(), err)
    assert status == 127
    assert err.getvalue() == "nosuchcmd: command not found\n"


def test_directory_cannot_be_executed(tmp_path):
    err = io.StringIO()
    status = run_pipeline([Section(cmd=[str(tmp_path)], fd_in=_devnull())], _state(), err)
    assert status == 126
    assert err.getvalue() == f"minishell: {tmp_path}: Is a directory\n"


def test_failed_external_section_exits_one():
    state = _state()
    status = run_pipeline([Section(cmd=_python("pass"), failed=True)], state, io.StringIO())
    assert status == 1


def test_environment_is_passed_to_children(tmp_path):
    target = tmp_path / "out.txt"
    state = _state(("PATH=/usr/bin:/bin", "GREETING=hi"))
    section = Section(cmd=_python("import os; print(os.environ['GREETING'])"),
                      fd_in=_devnull(), fd_out=_out_fd(target))
    assert run_pipeline([section], state, io.StringIO()) == 0
    assert target.read_text() == "hi\n"


def test_sections_without_commands_keep_status():
    state = _state()
    state.status = 42
    assert run_pipeline([Section(cmd=None), Section(cmd=None)], state, io.StringIO()) == 42