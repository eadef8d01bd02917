"""Span model: source positions for tokens, tree nodes and violations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Span:
    """A range of source text.

    Lines and columns are 1-based. ``end_column`` is exclusive, so a
    one-character token at column 5 has ``end_column == 6``.
    """

    line: int
    column: int
    end_line: int
    end_column: int

    @classmethod
    def of(cls, line: int, column: int, text: str) -> Span:
        """Span covering *text* when it starts at (*line*, *column*)."""
        end_line, end_column = advance(line, column, text)
        return cls(line, column, end_line, end_column)

    def sub(self, text: str, start: int, end: int) -> Span:
        """Span of ``text[start:end]`` where *text* starts at this span's start."""
        line, column = advance(self.line, self.column, text[:start])
        return Span.of(line, column, text[start:end])

    def to(self, other: Span) -> Span:
        """Span from the start of this span to the end of *other*."""
        return Span(self.line, self.column, other.end_line, other.end_column)

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


def advance(line: int, column: int, text: str) -> tuple[int, int]:
    """Position reached after reading *text* from (*line*, *column*)."""
    newlines = text.count("\n")
    if newlines == 0:
        return line, column + len(text)
    return line + newlines, len(text) - text.rfind("\n")
