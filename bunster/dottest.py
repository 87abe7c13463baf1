"""Parser for the dot-test format: labelled input/result sections in one file."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


@dataclass
class DotTest:
    """A single test case with a label, its input and its expected output."""

    label: str
    input: str = ""
    output: str = ""


class DotTestSyntaxError(ValueError):
    """Raised when the dot-test text is malformed."""


class _Step(Enum):
    START = auto()
    INPUT = auto()
    OUTPUT = auto()


_HEADER_PREFIX = "#(TEST:"
_RESULT = "#(RESULT)"
_END = "#(ENDTEST)"


def _split_lines(text: str) -> list[str]:
    """Split on newlines, keeping each newline with its line."""
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def parse(text: str) -> list[DotTest]:
    """Parse dot-test text into a list of tests."""
    step = _Step.START
    tests: list[DotTest] = []
    current = DotTest(label="")

    for number, line in enumerate(_split_lines(text), start=1):
        stripped = line.strip()

        if step is _Step.START:
            if not stripped:
                continue
            if not stripped.startswith(_HEADER_PREFIX):
                raise DotTestSyntaxError(
                    f"line {number}: bad test syntax, coundl't find test header "
                    f"'#(TEST: ...)', found \"{stripped}\""
                )
            label = stripped[len(_HEADER_PREFIX):]
            if not label.endswith(")"):
                raise DotTestSyntaxError(
                    f"line {number}: bad test syntax, unclosed test header '#(TEST: ...)'"
                )
            current.label = label[:-1].strip()
            if not current.label:
                raise DotTestSyntaxError(
                    f"line {number}: bad test syntax, test label cannot be blank"
                )
            step = _Step.INPUT
        elif step is _Step.INPUT:
            if stripped == _END or stripped.startswith(_HEADER_PREFIX):
                raise DotTestSyntaxError(
                    f"line {number}: bad test syntax, coundl't find #(RESULT) section"
                )
            if stripped == _RESULT:
                step = _Step.OUTPUT
            else:
                current.input += line
        else:
            if stripped == _RESULT or stripped.startswith(_HEADER_PREFIX):
                raise DotTestSyntaxError(
                    f"line {number}: bad test syntax, unclosed test, missing '#(ENDTEST)'"
                )
            if stripped == _END:
                tests.append(current)
                current = DotTest(label="")
                step = _Step.START
            else:
                current.output += line

    if step is _Step.INPUT:
        raise DotTestSyntaxError("bad test syntax, coundl't find #(RESULT) section")
    if step is _Step.OUTPUT:
        raise DotTestSyntaxError("bad test syntax, unclosed test, missing '#(ENDTEST)'")
    return tests