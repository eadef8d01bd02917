"""Token model: the flat output of the stylesheet lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stylecheck.model.span import Span


class TokenKind(Enum):
    """Kinds of token produced by the lexer."""

    SELECTOR = "selector"
    BRACE_OPEN = "brace-open"
    BRACE_CLOSE = "brace-close"
    PROPERTY = "property"
    VALUE = "value"
    COLON = "colon"
    SEMICOLON = "semicolon"
    COMMENT = "comment"
    AT_KEYWORD = "at-keyword"
    AMPERSAND = "ampersand"


# Kinds that can start a block header (the text before ``{``).
HEADER_KINDS = frozenset({TokenKind.SELECTOR, TokenKind.AT_KEYWORD, TokenKind.AMPERSAND})


@dataclass(frozen=True)
class Token:
    """A single lexed token.

    Attributes:
        kind: What the token is.
        raw: The exact source text of the token.
        span: Where the token sits in the source.
        indent: Leading whitespace of the token's line when the token is the
            first thing on that line, otherwise ``None``.
    """

    kind: TokenKind
    raw: str
    span: Span
    indent: str | None = None

    @property
    def line(self) -> int:
        return self.span.line

    @property
    def column(self) -> int:
        return self.span.column

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.raw!r}, {self.span})"
