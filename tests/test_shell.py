import sys

import pytest

from bunster.shell import ExitError, Shell
from bunster.stream import Buffer, StreamManager


def make_shell(args=None):
    return Shell("script", args, environ={"HOME_DIR": "/home/user"})


def test_exit_error_message():
    assert str(ExitError(7)) == "exit code 7"
    assert ExitError(7).code == 7


def test_read_var_precedence():
    shell = make_shell()
    assert shell.read_var("HOME_DIR") == "/home/user"
    shell.set_var("HOME_DIR", "global")
    assert shell.read_var("HOME_DIR") == "global"
    shell.set_local_var("HOME_DIR", "local")
    assert shell.read_var("HOME_DIR") == "local"
    assert shell.read_var("UNDEFINED") == ""


def test_var_is_set():
    shell = make_shell()
    assert shell.var_is_set("HOME_DIR")
    assert not shell.var_is_set("name")
    shell.set_var("name", "value")
    assert shell.var_is_set("name")


def test_set_var_updates_enclosing_local():
    shell = make_shell()
    shell.set_local_var("name", "outer")
    seen = []

    def fn(sh, stdin, stdout, stderr):
        sh.set_var("name", "changed")
        seen.append(sh.read_var("name"))

    shell.register_function("fn", fn)
    shell.command("fn").run()
    assert seen == ["changed"]
    assert shell.read_var("name") == "changed"


def test_read_special_var():
    shell = make_shell(["a", "b"])
    shell.exit_code = 3
    assert shell.read_special_var("0") == "script"
    assert shell.read_special_var("#") == str(len(shell.args))
    assert shell.read_special_var("?") == str(shell.exit_code)
    assert shell.read_special_var("1") == "a"
    assert shell.read_special_var("@") == "a b"
    assert shell.read_special_var("9") == ""
    assert shell.read_special_var("x") == ""
    assert shell.read_special_var("$") == str(shell.pid)


def test_function_shift_changes_caller_args():
    shell = make_shell(["a", "b", "c"])
    shell.register_function("sh", lambda sh, i, o, e: sh.shift(1))
    shell.command("sh").run()
    assert shell.args == ["b", "c"]

    shell.register_function("big", lambda sh, i, o, e: sh.shift(10))
    shell.command("big").run()
    assert shell.args == []


def test_function_receives_args_and_env():
    shell = make_shell()
    seen = {}

    def fn(sh, stdin, stdout, stderr):
        seen["args"] = sh.args
        seen["extra"] = sh.read_var("EXTRA")
        stdout.write(b"out")

    shell.register_function("fn", fn)
    cmd = shell.command("fn", "x", "y")
    cmd.env["EXTRA"] = "value"
    cmd.stdout = Buffer()
    cmd.run()
    assert seen == {"args": ["x", "y"], "extra": "value"}
    assert cmd.stdout.string() == "out"
    assert not shell.var_is_set("EXTRA")


def test_function_failure_raises_exit_error():
    shell = make_shell()

    def fail(sh, stdin, stdout, stderr):
        sh.exit_code = 5

    shell.register_function("fail", fail)
    cmd = shell.command("fail")
    with pytest.raises(ExitError) as info:
        cmd.run()
    assert info.value.code == 5
    assert cmd.exit_code == 5


def test_handle_error_exit_error_sets_code():
    shell = make_shell()
    sm = StreamManager()
    err = Buffer()
    sm.add("2", err)
    shell.handle_error(sm, ExitError(4))
    assert shell.exit_code == 4
    assert err.string() == ""


def test_handle_error_writes_message():
    shell = make_shell()
    sm = StreamManager()
    err = Buffer()
    sm.add("2", err)
    shell.handle_error(sm, RuntimeError("boom"))
    assert shell.exit_code == 1
    assert err.string() == "boom\n"


def test_handle_error_quotes_path():
    shell = make_shell()
    sm = StreamManager()
    err = Buffer()
    sm.add("2", err)
    shell.handle_error(sm, FileNotFoundError(2, "No such file or directory", "missing"))
    assert err.string() == '"missing": No such file or directory\n'


def test_handle_error_without_stderr():
    shell = make_shell()
    shell.handle_error(StreamManager(), ExitError(9))
    assert shell.exit_code == 1


def test_clone_is_independent():
    shell = make_shell(["a"])
    shell.set_var("name", "value")
    copy = shell.clone()
    copy.set_var("name", "other")
    copy.register_function("fn", lambda *a: None)
    assert shell.read_var("name") == "value"
    assert copy.read_var("name") == "other"
    assert copy.args == ["a"]
    with pytest.raises(FileNotFoundError):
        shell.command("fn").run()


def test_terminate_runs_deferred_in_reverse_order():
    shell = make_shell()
    order = []
    shell.defer(lambda sh, sm: order.append("first"))
    shell.defer(lambda sh, sm: order.append("second"))
    shell.terminate(StreamManager())
    assert order == ["second", "first"]


def test_external_command_output_and_env():
    shell = Shell()
    shell.set_export_var("GREETING", "hello")
    cmd = shell.command(sys.executable, "-c", "import os; print(os.environ['GREETING'])")
    cmd.stdout = Buffer()
    cmd.run()
    assert cmd.stdout.string(True) == "hello"
    assert cmd.exit_code == 0


def test_external_command_reads_stdin():
    shell = Shell()
    cmd = shell.command(sys.executable, "-c", "import sys; sys.stdout.write(sys.stdin.read())")
    cmd.stdin = Buffer("echoed")
    cmd.stdout = Buffer()
    cmd.run()
    assert cmd.stdout.string() == "echoed"


def test_external_command_exit_code():
    shell = Shell()
    cmd = shell.command(sys.executable, "-c", "import sys; sys.exit(4)")
    with pytest.raises(ExitError) as info:
        cmd.run()
    assert info.value.code == 4
    assert cmd.exit_code == 4


def test_missing_program_raises():
    shell = Shell()
    with pytest.raises(FileNotFoundError):
        shell.command("definitely-not-a-real-program-name").run()