"""Report model: per-file results and the aggregated, sorted report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from stylecheck.model.diagnostic import Severity, Violation
from stylecheck.model.span import Span


@dataclass(frozen=True)
class FileFailure:
    """A file that could not be checked at all.

    ``kind`` is ``"LexError"``, ``"ParseError"`` or ``"ReadError"``; ``reason``
    narrows it down (``"UnterminatedString"``, ``"UnbalancedBraces"``, ...).
    Read errors have no span.
    """

    path: str
    kind: str
    reason: str
    message: str
    span: Span | None = None

    @property
    def label(self) -> str:
        return f"{self.kind}:{self.reason}" if self.reason else self.kind

    def __str__(self) -> str:
        location = f"{self.path}:{self.span}" if self.span else self.path
        return f"{location}: FATAL [{self.label}] {self.message}"


@dataclass(frozen=True)
class FileResult:
    """Outcome of checking one file: its violations, or the failure that stopped it."""

    path: str
    violations: tuple[Violation, ...] = ()
    failure: FileFailure | None = None
    excerpts: Mapping[int, str] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.failure is not None


@dataclass(frozen=True)
class Report:
    """All findings of one run, in a total order."""

    violations: tuple[Violation, ...] = ()
    failures: tuple[FileFailure, ...] = ()
    files_checked: int = 0
    incomplete: bool = False
    excerpts: Mapping[str, Mapping[int, str]] = field(default_factory=dict)

    @classmethod
    def from_results(cls, results: Iterable[FileResult], incomplete: bool = False) -> Report:
        """Merge per-file results and sort them by (path, line, column, rule)."""
        results = list(results)
        violations = sorted(
            (v for r in results for v in r.violations), key=lambda v: v.sort_key
        )
        failures = sorted(
            (r.failure for r in results if r.failure is not None),
            key=lambda f: (f.path, f.span or Span(0, 0, 0, 0), f.label),
        )
        excerpts = {r.path: r.excerpts for r in results if r.excerpts}
        return cls(
            violations=tuple(violations),
            failures=tuple(failures),
            files_checked=sum(1 for r in results if not r.failed),
            incomplete=incomplete,
            excerpts=excerpts,
        )

    def count(self, severity: Severity) -> int:
        return sum(1 for v in self.violations if v.severity is severity)

    @property
    def error_count(self) -> int:
        return self.count(Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return self.count(Severity.WARNING)

    @property
    def counts(self) -> dict[str, int]:
        """Violation counts keyed by severity value."""
        return {s.value: self.count(s) for s in Severity}

    @property
    def passed(self) -> bool:
        """True when there are no error violations and no failed files."""
        return self.error_count == 0 and not self.failures

    @property
    def produced_nothing(self) -> bool:
        """True when every input failed before any file could be checked."""
        return self.files_checked == 0 and bool(self.failures) and all(
            f.kind == "ReadError" for f in self.failures
        )
