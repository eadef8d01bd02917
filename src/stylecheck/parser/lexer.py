"""Hand-written lexer for SCSS/CSS stylesheets.

The lexer works statement by statement: it finds where each statement ends
(the first ``{``, ``;`` or ``}`` outside strings, comments, brackets and
``#{}`` interpolation) and then splits the statement into header tokens or
declaration tokens. Braces and colons inside strings never desynchronize
block tracking.

Syntax example:
    .slider {
        display: block;

        &__slide { color: #fff; }
    }
"""

from __future__ import annotations

import re
from bisect import bisect_right
from typing import Iterator

from stylecheck.model.span import Span
from stylecheck.model.token import Token, TokenKind
from stylecheck.parser.errors import LexError, LexErrorKind

__all__ = ["Lexer", "tokenize"]

_AT_KEYWORD_RE = re.compile(r"@[\w-]*")
_NEWLINES_RE = re.compile(r"\r\n?")


class Lexer:
    """Restartable token stream over one stylesheet source.

    Every ``iter()`` starts a fresh, lazy pass over the text, so the same
    ``Lexer`` can be consumed more than once.
    """

    def __init__(self, source: str) -> None:
        self.source = _NEWLINES_RE.sub("\n", source)
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", self.source)]

    def __iter__(self) -> Iterator[Token]:
        return self._tokens()

    # --- positions ------------------------------------------------------------

    def position(self, offset: int) -> tuple[int, int]:
        """1-based (line, column) of a character offset."""
        index = bisect_right(self._line_starts, offset) - 1
        return index + 1, offset - self._line_starts[index] + 1

    def _span(self, start: int, end: int) -> Span:
        line, column = self.position(start)
        end_line, end_column = self.position(end)
        return Span(line, column, end_line, end_column)

    def _token(self, kind: TokenKind, start: int, end: int) -> Token:
        line_start = self._line_starts[self.position(start)[0] - 1]
        prefix = self.source[line_start:start]
        indent = prefix if not prefix.strip() else None
        return Token(kind, self.source[start:end], self._span(start, end), indent)

    # --- main loop ------------------------------------------------------------

    def _tokens(self) -> Iterator[Token]:
        src = self.source
        pos = 0
        while True:
            pos = self._skip_whitespace(pos)
            if pos >= len(src):
                return
            char = src[pos]
            if src.startswith("/*", pos):
                end = self._comment_end(pos)
                yield self._token(TokenKind.COMMENT, pos, end)
                pos = end
            elif src.startswith("//", pos):
                end = self._line_end(pos)
                yield self._token(TokenKind.COMMENT, pos, end)
                pos = end
            elif char == "{":
                yield self._token(TokenKind.BRACE_OPEN, pos, pos + 1)
                pos += 1
            elif char == "}":
                yield self._token(TokenKind.BRACE_CLOSE, pos, pos + 1)
                pos += 1
            elif char == ";":
                yield self._token(TokenKind.SEMICOLON, pos, pos + 1)
                pos += 1
            else:
                end = self._statement_end(pos)
                yield from self._statement(pos, end)
                pos = end

    # --- statements -----------------------------------------------------------

    def _statement(self, start: int, end: int) -> Iterator[Token]:
        """Split the statement ``source[start:end]`` into tokens."""
        end = start + len(self.source[start:end].rstrip())
        text = self.source[start:end]

        if self._next_significant(end) == "{":
            yield from self._header(start, end)
            return

        if text.startswith("@"):
            keyword_end = start + _AT_KEYWORD_RE.match(text).end()
            yield self._token(TokenKind.AT_KEYWORD, start, keyword_end)
            value_start = self._skip_whitespace(keyword_end, end)
            if value_start < end:
                yield self._token(TokenKind.VALUE, value_start, end)
            return

        colon = self._find_colon(start, end)
        if colon is not None:
            property_end = start + len(self.source[start:colon].rstrip())
        if colon is None or property_end == start:
            # No usable colon: leave it to the parser to reject.
            yield self._token(TokenKind.SELECTOR, start, end)
            return

        yield self._token(TokenKind.PROPERTY, start, property_end)
        yield self._token(TokenKind.COLON, colon, colon + 1)
        value_start = self._skip_whitespace(colon + 1, end)
        if value_start < end:
            yield self._token(TokenKind.VALUE, value_start, end)

    def _header(self, start: int, end: int) -> Iterator[Token]:
        """Tokens for the text in front of a ``{``."""
        text = self.source[start:end]
        if text.startswith("@"):
            lead = TokenKind.AT_KEYWORD
            lead_end = start + _AT_KEYWORD_RE.match(text).end()
        elif text.startswith("&"):
            lead = TokenKind.AMPERSAND
            lead_end = start + 1
        else:
            yield self._token(TokenKind.SELECTOR, start, end)
            return

        yield self._token(lead, start, lead_end)
        rest = self._skip_whitespace(lead_end, end)
        if rest < end:
            yield self._token(TokenKind.SELECTOR, rest, end)

    def _statement_end(self, start: int) -> int:
        """Offset of the character that ends the statement starting at *start*.

        ``{`` and ``}`` end a statement at any bracket depth; ``;`` and a ``//``
        comment only at depth 0 (``url(data:...;base64,...)`` stays whole). A
        ``//`` comment right after a comma is skipped, so a selector list or
        value list may carry a comment per line.
        """
        src = self.source
        depth = 0
        pos = start
        while pos < len(src):
            char = src[pos]
            if char in "\"'":
                pos = self._string_end(pos)
                continue
            if src.startswith("/*", pos):
                pos = self._comment_end(pos)
                continue
            if src.startswith("#{", pos):
                pos = self._interpolation_end(pos)
                continue
            if char in "{}":
                return pos
            if char in "([":
                depth += 1
            elif char in ")]":
                depth = max(depth - 1, 0)
            elif depth == 0 and char == ";":
                return pos
            elif depth == 0 and src.startswith("//", pos):
                if not src[start:pos].rstrip().endswith(","):
                    return pos
                pos = self._line_end(pos)
                continue
            pos += 1
        return pos

    def _find_colon(self, start: int, end: int) -> int | None:
        """Offset of the first colon outside brackets, strings and interpolation."""
        src = self.source
        depth = 0
        pos = start
        while pos < end:
            char = src[pos]
            if char in "\"'":
                pos = self._string_end(pos)
                continue
            if src.startswith("/*", pos):
                pos = self._comment_end(pos)
                continue
            if src.startswith("#{", pos):
                pos = self._interpolation_end(pos)
                continue
            if char in "([":
                depth += 1
            elif char in ")]":
                depth = max(depth - 1, 0)
            elif char == ":" and depth == 0:
                return pos
            pos += 1
        return None

    # --- skipping helpers -----------------------------------------------------

    def _skip_whitespace(self, pos: int, limit: int | None = None) -> int:
        limit = len(self.source) if limit is None else limit
        while pos < limit and self.source[pos].isspace():
            pos += 1
        return pos

    def _line_end(self, pos: int) -> int:
        end = self.source.find("\n", pos)
        return len(self.source) if end == -1 else end

    def _next_significant(self, pos: int) -> str:
        """The next character after *pos* that is not whitespace or a comment."""
        src = self.source
        while True:
            pos = self._skip_whitespace(pos)
            if src.startswith("/*", pos):
                end = src.find("*/", pos + 2)
                if end == -1:
                    return ""
                pos = end + 2
            elif src.startswith("//", pos):
                pos = self._line_end(pos)
            else:
                return src[pos] if pos < len(src) else ""

    def _comment_end(self, start: int) -> int:
        end = self.source.find("*/", start + 2)
        if end == -1:
            raise LexError(
                LexErrorKind.UNTERMINATED_COMMENT,
                "Block comment is not closed before end of input.",
                self._span(start, len(self.source)),
            )
        return end + 2

    def _string_end(self, start: int) -> int:
        """Offset just past the closing quote of the string opening at *start*."""
        src = self.source
        quote = src[start]
        pos = start + 1
        while pos < len(src):
            char = src[pos]
            if char == "\\":
                pos += 2
                continue
            if char == quote:
                return pos + 1
            if char == "\n":
                break
            pos += 1
        pos = min(pos, len(src))
        raise LexError(
            LexErrorKind.UNTERMINATED_STRING,
            f"String starting with {quote} is not closed.",
            self._span(start, pos),
        )

    def _interpolation_end(self, start: int) -> int:
        src = self.source
        depth = 0
        pos = start + 1
        while pos < len(src):
            char = src[pos]
            if char in "\"'":
                pos = self._string_end(pos)
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return pos + 1
            pos += 1
        return pos


def tokenize(source: str) -> Iterator[Token]:
    """Lazily tokenize *source*."""
    return iter(Lexer(source))
