"""stylecheck model layer -- public type re-exports."""

from stylecheck.model.diagnostic import Severity, Violation
from stylecheck.model.report import FileFailure, FileResult, Report
from stylecheck.model.span import Span
from stylecheck.model.token import Token, TokenKind
from stylecheck.model.tree import Declaration, RuleBlock

__all__ = [
    # span
    "Span",
    # token
    "TokenKind",
    "Token",
    # tree
    "Declaration",
    "RuleBlock",
    # diagnostic
    "Severity",
    "Violation",
    # report
    "FileFailure",
    "FileResult",
    "Report",
]
