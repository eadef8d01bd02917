"""Report rendering and exit status."""

from stylecheck.report.render import (
    EXIT_FINDINGS,
    EXIT_NO_REPORT,
    EXIT_OK,
    FORMATS,
    exit_code,
    render,
    render_human,
    render_structured,
)

__all__ = [
    "EXIT_OK",
    "EXIT_FINDINGS",
    "EXIT_NO_REPORT",
    "FORMATS",
    "exit_code",
    "render",
    "render_human",
    "render_structured",
]
