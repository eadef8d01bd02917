"""Diagnostic model: style violations found in a stylesheet."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stylecheck.model.span import Span


class Severity(Enum):
    """Severity level for a violation."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Violation:
    """A single finding: well-formed input that breaks a style rule.

    Attributes:
        rule: Identifier of the rule that produced this violation.
        severity: How serious the finding is.
        message: Human-readable description of the problem.
        span: Where the problem is in the source.
        path: The file the violation belongs to; empty until the file is known.
    """

    rule: str
    severity: Severity
    message: str
    span: Span
    path: str = ""

    @property
    def sort_key(self) -> tuple[str, int, int, str, str]:
        return (self.path, self.span.line, self.span.column, self.rule, self.message)

    def __str__(self) -> str:
        return f"{self.path}:{self.span.line}:{self.span.column}: [{self.rule}] {self.message}"
