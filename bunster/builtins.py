"""Builtin commands available to every compiled script."""

from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any

from .loadenv import loadenv

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _report(stream: Any, message: str) -> None:
    if stream is not None:
        stream.write(message.encode())


def register(shell) -> None:
    """Register every builtin command on ``shell``."""
    shell.register_function("true", true_command)
    shell.register_function("false", false_command)
    shell.register_function("loadenv", loadenv)
    shell.register_function("embed", embed)
    shell.register_function("shift", shift)


def true_command(shell, stdin, stdout, stderr) -> None:
    """Builtin: succeed."""
    shell.exit_code = 0


def false_command(shell, stdin, stdout, stderr) -> None:
    """Builtin: fail with exit code 1."""
    shell.exit_code = 1


def _embedded_root(shell) -> Any:
    root = shell.embed
    if isinstance(root, (str, os.PathLike)):
        return Path(root)
    return root


def embed(shell, stdin, stdout, stderr) -> None:
    """Builtin: `embed cat PATH` prints an embedded file, `embed ls PATH` lists a directory."""
    if shell.embed is None:
        _report(stderr, "embed: no files were embedded\n")
        shell.exit_code = 1
        return

    if len(shell.args) != 2:
        _report(stderr, f"embed: expected 2 arguments, got {len(shell.args)}\n")
        shell.exit_code = 1
        return

    action, path = shell.args
    root = _embedded_root(shell)

    if action == "cat":
        try:
            with root.joinpath(path).open("rb") as handle:
                while chunk := handle.read(65536):
                    stdout.write(chunk)
        except OSError as error:
            _report(stderr, f"embed: {error}\n")
            shell.exit_code = 1
        return

    if action == "ls":
        try:
            names = sorted(entry.name for entry in root.joinpath(path).iterdir())
        except OSError as error:
            _report(stderr, f"embed: {error}\n")
            shell.exit_code = 1
            return
        stdout.write(("\n".join(names) + "\n").encode())
        return

    _report(stderr, f"embed: {_quote(action)} is not a valid embed command\n")
    shell.exit_code = 1


def shift(shell, stdin, stdout, stderr) -> None:
    """Builtin: drop positional arguments of the caller (one by default)."""
    if len(shell.args) > 1:
        _report(stderr, f"embed: expected 1 or 0 arguments, got {len(shell.args)}\n")
        shell.exit_code = 1
        return

    if not shell.args:
        shell.shift(1)
        return

    count = shell.args[0]
    if not _INTEGER.fullmatch(count):
        _report(stderr, f"embed: {_quote(count)} is not a valid integer\n")
        shell.exit_code = 1
        return

    try:
        shell.shift(int(count))
    except ValueError as error:
        _report(stderr, f"embed: {error}\n")
        shell.exit_code = 1