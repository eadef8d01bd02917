"""Report renderers: human-readable listing and JSON Lines records."""

from __future__ import annotations

import json
from typing import Any, Mapping

from stylecheck.model.report import FileFailure, Report
from stylecheck.model.span import Span

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_NO_REPORT = 2

FORMATS = ("human", "structured")


def exit_code(report: Report) -> int:
    """0 when clean, 1 for error violations or failed files, 2 when nothing could be read."""
    if report.produced_nothing:
        return EXIT_NO_REPORT
    return EXIT_OK if report.passed else EXIT_FINDINGS


# ---------------------------------------------------------------------------
# Human
# ---------------------------------------------------------------------------


def _excerpt(lines: Mapping[int, str], span: Span | None, tab_width: int) -> list[str]:
    if span is None or span.line not in lines:
        return []
    text = lines[span.line]
    caret = len(text[: span.column - 1].expandtabs(tab_width))
    return [f"    {text.expandtabs(tab_width)}", f"    {' ' * caret}^"]


def render_human(report: Report, tab_width: int = 4) -> str:
    """One ``path:line:col: [rule-id] message`` line per violation, then a summary."""
    out: list[str] = []
    for violation in report.violations:
        out.append(str(violation))
        out.extend(_excerpt(report.excerpts.get(violation.path, {}), violation.span, tab_width))
    for failure in report.failures:
        out.append(str(failure))
        out.extend(_excerpt(report.excerpts.get(failure.path, {}), failure.span, tab_width))

    if out:
        out.append("")
    summary = (
        f"Summary: {report.error_count} error(s), {report.warning_count} warning(s), "
        f"{len(report.failures)} failed file(s), {report.files_checked} file(s) checked"
    )
    if report.incomplete:
        summary += " (incomplete: run was cancelled)"
    out.append(summary)
    return "\n".join(out) + "\n"


# ---------------------------------------------------------------------------
# Structured
# ---------------------------------------------------------------------------


def _failure_record(failure: FileFailure) -> dict[str, Any]:
    span = failure.span
    return {
        "type": "failure",
        "path": failure.path,
        "line": span.line if span else None,
        "column": span.column if span else None,
        "kind": failure.kind,
        "reason": failure.reason,
        "message": failure.message,
    }


def render_structured(report: Report) -> str:
    """JSON Lines: one record per violation, one per failure, then a summary."""
    records: list[dict[str, Any]] = []
    for v in report.violations:
        records.append(
            {
                "type": "violation",
                "path": v.path,
                "line": v.span.line,
                "column": v.span.column,
                "end_line": v.span.end_line,
                "end_column": v.span.end_column,
                "rule": v.rule,
                "severity": v.severity.value,
                "message": v.message,
            }
        )
    records.extend(_failure_record(f) for f in report.failures)
    records.append(
        {
            "type": "summary",
            "counts": report.counts,
            "failures": len(report.failures),
            "files": report.files_checked,
            "incomplete": report.incomplete,
        }
    )
    return "".join(json.dumps(record) + "\n" for record in records)


def render(report: Report, fmt: str = "human", tab_width: int = 4) -> str:
    if fmt == "structured":
        return render_structured(report)
    if fmt == "human":
        return render_human(report, tab_width=tab_width)
    raise ValueError(f"Unknown report format: {fmt!r}")
