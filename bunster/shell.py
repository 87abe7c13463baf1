"""Shell state for compiled scripts: variables, functions and commands."""

from __future__ import annotations

import io
import os
import subprocess
import threading
from typing import Any, Callable, Generic, Optional, TypeVar

from .stream import Stream, StreamError, StreamManager

T = TypeVar("T")

PredefinedCommand = Callable[
    ["Shell", Optional[Stream], Optional[Stream], Optional[Stream]], None
]


class ExitError(Exception):
    """A command finished with a non-zero exit code."""

    def __init__(self, code: int) -> None:
        super().__init__(code)
        self.code = code

    def __str__(self) -> str:
        return f"exit code {self.code}"


class _Registry(Generic[T]):
    """A thread-safe name-to-value mapping."""

    def __init__(self, data: Any = None) -> None:
        self._lock = threading.RLock()
        self._data: dict[str, T] = dict(data or {})

    def get(self, key: str) -> T | None:
        with self._lock:
            return self._data.get(key)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def set(self, key: str, value: T) -> None:
        with self._lock:
            self._data[key] = value

    def items(self) -> list[tuple[str, T]]:
        with self._lock:
            return list(self._data.items())

    def clone(self) -> _Registry[T]:
        with self._lock:
            return _Registry(self._data)


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class Shell:
    """Variables, positional arguments, functions and deferred handlers of a shell."""

    def __init__(
        self,
        path: str = "",
        args: list[str] | None = None,
        *,
        pid: int | None = None,
        embed: Any = None,
        environ: Any = None,
    ) -> None:
        self.parent: Shell | None = None
        self.pid = os.getpid() if pid is None else pid
        self.path = path
        self.exit_code = 0
        self.args: list[str] = list(args or [])
        self.embed = embed
        self._vars: _Registry[str] = _Registry()
        self._env: _Registry[str] = _Registry(os.environ if environ is None else environ)
        self._local_vars: _Registry[str] = _Registry()
        self._exported: _Registry[bool] = _Registry()
        self._functions: _Registry[PredefinedCommand] = _Registry()
        self._deferred: list[Callable[[Shell, StreamManager], None]] = []

    def shift(self, n: int) -> None:
        """Drop the first ``n`` positional arguments of the calling shell."""
        if n < 0:
            raise ValueError(f"shift count must not be negative: {n}")
        target = self.parent if self.parent is not None else self
        target.args = target.args[n:] if n <= len(target.args) else []

    def read_var(self, name: str) -> str:
        """Look a variable up in locals, globals, environment, then the parent."""
        for value in (self._get_local_var(name), self._vars.get(name), self._env.get(name)):
            if value is not None:
                return value
        if self.parent is not None:
            return self.parent.read_var(name)
        return ""

    def var_is_set(self, name: str) -> bool:
        """Report whether the variable is defined in this shell."""
        return (
            self._get_local_var(name) is not None
            or name in self._vars
            or name in self._env
        )

    def _set_existing_local_var(self, name: str, value: str) -> bool:
        if name in self._local_vars:
            self._local_vars.set(name, value)
            return True
        if self.parent is not None:
            return self.parent._set_existing_local_var(name, value)
        return False

    def _get_local_var(self, name: str) -> str | None:
        value = self._local_vars.get(name)
        if value is not None:
            return value
        if self.parent is not None:
            return self.parent._get_local_var(name)
        return None

    def set_var(self, name: str, value: str) -> None:
        """Assign a variable, updating an enclosing local one if it exists."""
        if not self._set_existing_local_var(name, value):
            self._vars.set(name, value)

    def set_local_var(self, name: str, value: str) -> None:
        """Define a variable local to this shell."""
        self._local_vars.set(name, value)

    def set_export_var(self, name: str, value: str) -> None:
        """Assign a variable and mark it as exported."""
        self._exported.set(name, True)
        self._vars.set(name, value)

    def mark_var_as_exported(self, name: str) -> None:
        """Pass the variable on to the environment of external commands."""
        self._exported.set(name, True)

    def read_special_var(self, name: str) -> str:
        """Return the value of $0, $$, $#, $?, $*, $@ or a positional parameter."""
        if name == "0":
            return self.path
        if name == "$":
            return str(self.pid)
        if name == "#":
            return str(len(self.args))
        if name == "?":
            return str(self.exit_code)
        if name in ("*", "@"):
            return " ".join(self.args)
        if name.isascii() and name.isdigit():
            index = int(name)
            if 1 <= index <= len(self.args):
                return self.args[index - 1]
        return ""

    def handle_error(self, streams: StreamManager, error: BaseException) -> None:
        """Set the exit code for ``error`` and report it on descriptor 2."""
        self.exit_code = 1
        try:
            stderr = streams.get("2")
        except StreamError:
            return

        if isinstance(error, ExitError):
            self.exit_code = error.code
            return
        if isinstance(error, subprocess.CalledProcessError):
            self.exit_code = error.returncode
            return
        if isinstance(error, OSError) and error.filename is not None:
            message = f"{_quote(str(error.filename))}: {error.strerror}\n"
        else:
            message = f"{error}\n"
        stderr.write(message.encode())

    def clone(self) -> Shell:
        """Return an independent copy with its own variables and functions."""
        copy = Shell(self.path, self.args, pid=self.pid, embed=self.embed, environ={})
        copy.exit_code = self.exit_code
        copy._functions = self._functions.clone()
        copy._vars = self._vars.clone()
        copy._local_vars = self._local_vars.clone()
        copy._env = self._env.clone()
        copy._exported = self._exported.clone()
        return copy

    def register_function(self, name: str, handler: PredefinedCommand) -> None:
        """Make ``handler`` callable as a command named ``name``."""
        self._functions.set(name, handler)

    def defer(self, handler: Callable[[Shell, StreamManager], None]) -> None:
        """Schedule ``handler`` to run when the shell terminates."""
        self._deferred.append(handler)

    def terminate(self, streams: StreamManager) -> None:
        """Run deferred handlers, most recently deferred first."""
        for handler in reversed(self._deferred):
            handler(self, streams)

    def command(self, name: str, *args: str) -> Command:
        """Prepare a command: a registered function or an external program."""
        return Command(self, name, list(args), function=self._functions.get(name))

    def _function_scope(self, args: list[str], env: dict[str, str]) -> Shell:
        scope = Shell(self.path, args, pid=self.pid, embed=self.embed, environ={})
        scope.parent = self
        scope.exit_code = self.exit_code
        scope._functions = self._functions
        scope._vars = self._vars
        scope._exported = self._exported
        scope._env = self._env.clone()
        for key, value in env.items():
            scope._env.set(key, value)
        return scope


def _fileno(stream: Any) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation, ValueError):
        return None


class Command:
    """A command ready to run, with its streams and extra environment."""

    def __init__(
        self,
        shell: Shell,
        name: str,
        args: list[str],
        *,
        function: PredefinedCommand | None = None,
    ) -> None:
        self.shell = shell
        self.name = name
        self.args = args
        self.stdin: Stream | None = None
        self.stdout: Stream | None = None
        self.stderr: Stream | None = None
        self.env: dict[str, str] = {}
        self.exit_code = 0
        self._function = function
        self._thread: threading.Thread | None = None
        self._process: subprocess.Popen | None = None
        self._copiers: list[threading.Thread] = []
        self._errors: list[BaseException] = []

    def run(self) -> None:
        """Start the command and wait for it to finish."""
        self.start()
        self.wait()

    def start(self) -> None:
        """Start the command without waiting for it."""
        if self._function is not None:
            self._start_function(self._function)
        else:
            self._start_process()

    def _start_function(self, function: PredefinedCommand) -> None:
        scope = self.shell._function_scope(list(self.args), self.env)

        def target() -> None:
            try:
                function(scope, self.stdin, self.stdout, self.stderr)
            except BaseException as error:  # re-raised from wait()
                self._errors.append(error)
            self.exit_code = scope.exit_code

        self._thread = threading.Thread(target=target, daemon=True)
        self._thread.start()

    def _environment(self) -> dict[str, str]:
        environment = dict(self.shell._env.items())
        for name, _ in self.shell._exported.items():
            environment[name] = self.shell.read_var(name)
        environment.update(self.env)
        return environment

    def _start_process(self) -> None:
        stdin_arg, stdin_source = self._attach(self.stdin)
        stdout_arg, stdout_target = self._attach(self.stdout)
        stderr_arg, stderr_target = self._attach(self.stderr)
        process = subprocess.Popen(
            [self.name, *self.args],
            stdin=stdin_arg,
            stdout=stdout_arg,
            stderr=stderr_arg,
            env=self._environment(),
            bufsize=0,
        )
        self._process = process
        if stdin_source is not None:
            self._spawn_copy(stdin_source, process.stdin, close_target=True)
        if stdout_target is not None:
            self._spawn_copy(process.stdout, stdout_target, close_target=False)
        if stderr_target is not None:
            self._spawn_copy(process.stderr, stderr_target, close_target=False)

    @staticmethod
    def _attach(stream: Stream | None) -> tuple[Any, Stream | None]:
        if stream is None:
            return subprocess.DEVNULL, None
        fd = _fileno(stream)
        if fd is not None:
            return fd, None
        return subprocess.PIPE, stream

    def _spawn_copy(self, source: Any, target: Any, *, close_target: bool) -> None:
        def copy() -> None:
            try:
                while chunk := source.read(65536):
                    target.write(chunk)
            except BrokenPipeError:
                pass
            except OSError as error:
                self._errors.append(error)
            finally:
                if close_target:
                    try:
                        target.close()
                    except OSError:
                        pass

        thread = threading.Thread(target=copy, daemon=True)
        thread.start()
        self._copiers.append(thread)

    def wait(self) -> None:
        """Wait for the command; raise ExitError on a non-zero exit code."""
        if self._function is not None:
            if self._thread is not None:
                self._thread.join()
        elif self._process is not None:
            self.exit_code = self._process.wait()
            for thread in self._copiers:
                thread.join()
        if self._errors:
            raise self._errors[0]
        if self.exit_code != 0:
            raise ExitError(self.exit_code)