"""Reading of dotenv files and the `loadenv` builtin command."""

from __future__ import annotations

import json
import os
import re

_SPACE = "\t\v\f\r \x85\xa0"
_EXPORT_PREFIX = "export"

_ESCAPE = re.compile(r"\\.")
_EXPAND_VAR = re.compile(r"(\\)?(\$)(\()?\{?([A-Z0-9_]+)?\}?")
_UNESCAPE_CHARS = re.compile(r"\\([^$])")

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


class EnvParseError(ValueError):
    """Raised when a dotenv document is malformed."""


def _is_space(char: str) -> bool:
    return char in _SPACE


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _statement_start(src: str) -> str | None:
    while True:
        stripped = src.lstrip()
        if not stripped:
            return None
        if stripped[0] != "#":
            return stripped
        newline = stripped.find("\n")
        if newline == -1:
            return None
        src = stripped[newline:]


def _locate_key_name(src: str) -> tuple[str, str]:
    src = src.lstrip(_SPACE)
    if src.startswith(_EXPORT_PREFIX):
        trimmed = src[len(_EXPORT_PREFIX):]
        if trimmed and _is_space(trimmed[0]):
            src = trimmed.lstrip(_SPACE)

    key = ""
    offset = 0
    for index, char in enumerate(src):
        if _is_space(char):
            continue
        if char in "=:":
            key = src[:index]
            offset = index + 1
            break
        if char == "_" or char == "." or char.isalpha() or char.isnumeric():
            continue
        raise EnvParseError(
            f"unexpected character {_quote(char)} in variable name near {_quote(src)}"
        )

    if not src:
        raise EnvParseError("zero length string")

    return key.rstrip(), src[offset:].lstrip(_SPACE)


def _extract_value(src: str, variables: dict[str, str]) -> tuple[str, str]:
    quote = src[0] if src and src[0] in "\"'" else None

    if quote is None:
        end_of_line = next(
            (index for index, char in enumerate(src) if char in "\n\r"), len(src)
        )
        line = src[:end_of_line]
        if not line:
            return "", src[end_of_line:]
        end_of_var = len(line)
        for index, char in enumerate(line):
            if char == "#" and index > 0 and _is_space(line[index - 1]):
                end_of_var = index
                break
        trimmed = line[:end_of_var].strip(_SPACE)
        return expand_variables(trimmed, variables), src[end_of_line:]

    for index in range(1, len(src)):
        if src[index] != quote or src[index - 1] == "\\":
            continue
        value = src[:index].strip(quote)
        if quote == '"':
            value = expand_variables(_expand_escapes(value), variables)
        return value, src[index + 1:]

    end = src.find("\n")
    if end == -1:
        end = len(src)
    raise EnvParseError(f"unterminated quoted value {src[:end]}")


def _expand_escapes(text: str) -> str:
    def replace(match: re.Match) -> str:
        char = match.group(0)[1:]
        if char == "n":
            return "\n"
        if char == "r":
            return "\r"
        return match.group(0)

    return _UNESCAPE_CHARS.sub(r"\1", _ESCAPE.sub(replace, text))


def expand_variables(value: str, variables: dict[str, str]) -> str:
    """Replace $NAME and ${NAME} with values from ``variables`` or the environment."""

    def replace(match: re.Match) -> str:
        whole = match.group(0)
        if match.group(1):
            return whole[1:]
        name = match.group(4)
        if name:
            if name in variables:
                return variables[name]
            return os.environ.get(name, "")
        return whole

    return _EXPAND_VAR.sub(replace, value)


def parse_env(text: str) -> dict[str, str]:
    """Parse dotenv text into a mapping of names to values."""
    result: dict[str, str] = {}
    rest: str | None = text.replace("\r\n", "\n")
    while True:
        rest = _statement_start(rest)
        if rest is None:
            break
        key, rest = _locate_key_name(rest)
        value, rest = _extract_value(rest, result)
        result[key] = value
    return result


def read_env_file(filename: str) -> dict[str, str]:
    """Read and parse a dotenv file."""
    with open(filename, encoding="utf-8") as handle:
        return parse_env(handle.read())


def _report(stream, message: str) -> None:
    if stream is not None:
        stream.write(message.encode())


def _parse_flags(args: list[str]) -> tuple[bool, list[str]]:
    export = False
    for position, arg in enumerate(args):
        if arg == "--":
            return export, args[position + 1:]
        if len(arg) < 2 or not arg.startswith("-"):
            return export, args[position:]
        name = arg[2:] if arg.startswith("--") else arg[1:]
        name, has_value, value = name.partition("=")
        if name != "X":
            raise EnvParseError(f"flag provided but not defined: -{name}")
        if not has_value:
            export = True
        elif value in _TRUE:
            export = True
        elif value in _FALSE:
            export = False
        else:
            raise EnvParseError(
                f'invalid boolean value "{value}" for -X: parse error'
            )
    return export, []


def loadenv(shell, stdin, stdout, stderr) -> None:
    """Builtin: load variables from dotenv files (default .env); -X exports them."""
    try:
        export, files = _parse_flags(list(shell.args))
    except EnvParseError as error:
        _report(stderr, f"{error}\nUsage of loadenv:\n  -X\tmark variables as exported\n")
        shell.exit_code = 1
        return

    for filename in files or [".env"]:
        try:
            variables = read_env_file(filename)
        except (OSError, UnicodeDecodeError, EnvParseError) as error:
            _report(stderr, f"loadenv: {error}\n")
            shell.exit_code = 1
            return
        for key, value in variables.items():
            shell.set_var(key, value)
            if export:
                shell.mark_var_as_exported(key)

    shell.exit_code = 0