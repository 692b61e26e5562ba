"""Edit-distance and balance counting shared by the fix rules."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


def levenshtein(a: str, b: str) -> int:
    """Exact Levenshtein distance using the full dynamic-programming matrix."""
    m, n = len(a), len(b)
    dp = [[0] * (n + 1) for _ in range(m + 1)]

    for i in range(m + 1):
        dp[i][0] = i
    for j in range(n + 1):
        dp[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            dp[i][j] = min(
                dp[i - 1][j] + 1,
                dp[i][j - 1] + 1,
                dp[i - 1][j - 1] + (0 if a[i - 1] == b[j - 1] else 1),
            )

    return dp[m][n]


def count_braces(line: str) -> tuple[int, int]:
    """Return (opening, closing) curly brace counts for a line."""
    return line.count("{"), line.count("}")


def find_extra_closing_brace(line: str) -> int | None:
    """Index of the first '}' that closes more braces than were opened."""
    opens = 0
    closes = 0
    for i, ch in enumerate(line):
        if ch == "{":
            opens += 1
        elif ch == "}":
            closes += 1
            if closes > opens:
                return i
    return None


@dataclass(frozen=True)
class EnvironmentBalance:
    """Occurrences of one environment's \\begin and \\end markers."""

    begins: int
    ends: int
    last_begin_line: int | None  # 1-indexed
    last_end_line: int | None

    @property
    def balanced(self) -> bool:
        return self.begins == self.ends


def count_environment(lines: Sequence[str], name: str) -> EnvironmentBalance:
    """Count \\begin{name} and \\end{name} across a whole document."""
    begin_marker = f"\\begin{{{name}}}"
    end_marker = f"\\end{{{name}}}"
    begins = ends = 0
    last_begin: int | None = None
    last_end: int | None = None

    for number, line in enumerate(lines, start=1):
        found = line.count(begin_marker)
        if found:
            begins += found
            last_begin = number
        found = line.count(end_marker)
        if found:
            ends += found
            last_end = number

    return EnvironmentBalance(begins, ends, last_begin, last_end)
