"""Parser error types."""

from __future__ import annotations

from enum import Enum

from stylecheck.model.span import Span


class LexErrorKind(Enum):
    UNTERMINATED_STRING = "UnterminatedString"
    UNTERMINATED_COMMENT = "UnterminatedComment"


class ParseErrorKind(Enum):
    UNBALANCED_BRACES = "UnbalancedBraces"
    DECLARATION_OUTSIDE_BLOCK = "DeclarationOutsideBlock"
    MALFORMED_DECLARATION = "MalformedDeclaration"


class SourceError(Exception):
    """Raised when stylesheet source cannot be turned into a tree."""

    def __init__(self, message: str, span: Span) -> None:
        self.span = span
        super().__init__(message)

    @property
    def line(self) -> int:
        return self.span.line

    @property
    def column(self) -> int:
        return self.span.column


class LexError(SourceError):
    """Malformed low-level syntax: an unterminated string or comment."""

    def __init__(self, kind: LexErrorKind, message: str, span: Span) -> None:
        self.kind = kind
        super().__init__(message, span)


class ParseError(SourceError):
    """Malformed block structure: unbalanced braces or a misplaced declaration."""

    def __init__(self, kind: ParseErrorKind, message: str, span: Span) -> None:
        self.kind = kind
        super().__init__(message, span)
