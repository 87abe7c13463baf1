"""Line-based coloured diffs built on a longest-common-subsequence table."""

from __future__ import annotations

from dataclasses import dataclass

_FG_RED = "\033[31m"
_FG_GREEN = "\033[32m"
_BG_RED = "\033[41m"
_BG_GREEN = "\033[42m"
_RESET = "\033[0m"

ADD = "add"
DELETE = "delete"
UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DiffOperation:
    """One line of a diff: its kind ("add", "delete" or "unchanged") and text."""

    type: str
    line: str


def diff(original: str, modified: str) -> str:
    """Return a git-like diff of two strings using foreground colours."""
    return _diff_strings(original, modified, _FG_RED, _FG_GREEN)


def diff_bg(original: str, modified: str) -> str:
    """Return a git-like diff of two strings using background colours."""
    return _diff_strings(original, modified, _BG_RED, _BG_GREEN)


def _diff_strings(original: str, modified: str, red: str, green: str) -> str:
    ops = compute_diff(original.split("\n"), modified.split("\n"))
    out = []
    for op in ops:
        if op.type == UNCHANGED:
            out.append(f"  {op.line}")
        elif op.type == DELETE:
            out.append(f"{red}- {op.line}{_RESET}")
        else:
            out.append(f"{green}+ {op.line}{_RESET}")
    return "\n".join(out)


def compute_diff(original: list[str], modified: list[str]) -> list[DiffOperation]:
    """Compute the sequence of operations turning ``original`` into ``modified``."""
    m, n = len(original), len(modified)
    lcs = [[0] * (n + 1) for _ in range(m + 1)]
    for i, left in enumerate(original, start=1):
        for j, right in enumerate(modified, start=1):
            if left == right:
                lcs[i][j] = lcs[i - 1][j - 1] + 1
            else:
                lcs[i][j] = max(lcs[i - 1][j], lcs[i][j - 1])

    ops: list[DiffOperation] = []
    i, j = m, n
    while i > 0 or j > 0:
        if i > 0 and j > 0 and original[i - 1] == modified[j - 1]:
            ops.append(DiffOperation(UNCHANGED, original[i - 1]))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or lcs[i][j - 1] >= lcs[i - 1][j]):
            ops.append(DiffOperation(ADD, modified[j - 1]))
            j -= 1
        else:
            ops.append(DiffOperation(DELETE, original[i - 1]))
            i -= 1
    ops.reverse()
    return ops