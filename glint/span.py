"""Source positions for Glint.

A `Span` is a half-open range of offsets into the original source string.
Every token, AST node and diagnostic carries one, so that any failure can be
pointed back at the exact text that caused it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Span:
    """Half-open `[start, end)` range of offsets into a source string."""
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span {self.start}..{self.end}")

    @staticmethod
    def single(pos: int) -> 'Span':
        return Span(pos, pos + 1)

    @staticmethod
    def empty(pos: int) -> 'Span':
        return Span(pos, pos)

    def __len__(self) -> int:
        return self.end - self.start

    def merge(self, other: 'Span') -> 'Span':
        """Return the smallest span covering both `self` and `other`."""
        return Span(min(self.start, other.start), max(self.end, other.end))

    def text(self, source: str) -> str:
        return source[self.start:self.end]

    def __repr__(self) -> str:
        return f"Span({self.start}..{self.end})"


def line_col(source: str, offset: int) -> Tuple[int, int]:
    """Return the 1-based (line, column) of `offset` in `source`."""
    offset = min(offset, len(source))
    line = source.count('\n', 0, offset) + 1
    line_start = source.rfind('\n', 0, offset) + 1
    return line, offset - line_start + 1
