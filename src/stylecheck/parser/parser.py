"""Block-structured parser: groups lexer tokens into a RuleBlock tree.

A stack of open blocks is kept. Header tokens followed by ``{`` push a new
block, ``}`` pops it and attaches it to its parent, and property/colon/value
runs become declarations of the block on top of the stack. ``&`` selectors
are recorded verbatim and never expanded. There is no error recovery: the
first structural problem raises :class:`ParseError`.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from stylecheck.model.span import Span
from stylecheck.model.token import HEADER_KINDS, Token, TokenKind
from stylecheck.model.tree import Declaration, RuleBlock
from stylecheck.parser.errors import ParseError, ParseErrorKind
from stylecheck.parser.lexer import tokenize

__all__ = ["parse_stylesheet", "parse_tokens"]


class _OpenBlock:
    """A block whose closing brace has not been seen yet."""

    def __init__(
        self,
        selector: str = "",
        start: Span | None = None,
        selector_span: Span | None = None,
        blank_line_before: bool = False,
        at_keyword: str | None = None,
        open_brace: Span | None = None,
        depth: int = 0,
        indent: str | None = None,
    ) -> None:
        self.selector = selector
        self.start = start or Span(1, 1, 1, 1)
        self.selector_span = selector_span
        self.blank_line_before = blank_line_before
        self.at_keyword = at_keyword
        self.open_brace = open_brace
        self.depth = depth
        self.indent = indent
        self.declarations: list[Declaration] = []
        self.children: list[RuleBlock] = []

    def close(self, end: Span, brace: Token | None = None) -> RuleBlock:
        return RuleBlock(
            selector=self.selector,
            span=self.start.to(end),
            selector_span=self.selector_span,
            declarations=tuple(self.declarations),
            children=tuple(self.children),
            blank_line_before=self.blank_line_before,
            at_keyword=self.at_keyword,
            open_brace=self.open_brace,
            close_brace=brace.span if brace else None,
            depth=self.depth,
            indent=self.indent,
            close_indent=brace.indent if brace else None,
        )


def _join(tokens: list[Token]) -> str:
    """Rebuild header text from its tokens, keeping the gaps between them."""
    text = tokens[0].raw
    for prev, token in zip(tokens, tokens[1:]):
        if token.line == prev.span.end_line:
            text += " " * (token.column - prev.span.end_column)
        else:
            text += "\n" * (token.line - prev.span.end_line) + " " * (token.column - 1)
        text += token.raw
    return text


class _Parser:
    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens: Iterator[Token] = iter(tokens)
        self._peeked: Token | None = None
        self._comment_lines: set[int] = set()
        self._last_line = 0  # end line of the last non-comment token
        self._line_before = 0  # _last_line before the current token
        self._end = Span(1, 1, 1, 1)

    # --- token access ---------------------------------------------------------

    def _peek(self) -> Token | None:
        """Next non-comment token, without consuming it."""
        while self._peeked is None:
            token = next(self._tokens, None)
            if token is None:
                return None
            if token.kind is TokenKind.COMMENT:
                self._comment_lines.update(range(token.line, token.span.end_line + 1))
                self._end = token.span
            else:
                self._peeked = token
        return self._peeked

    def _peek_kind(self) -> TokenKind | None:
        token = self._peek()
        return token.kind if token else None

    def _next(self) -> Token | None:
        token = self._peek()
        if token is not None:
            self._peeked = None
            self._line_before = self._last_line
            self._last_line = token.span.end_line
            self._end = token.span
        return token

    def _has_blank_line(self, after: int, before: int) -> bool:
        return any(line not in self._comment_lines for line in range(after + 1, before))

    # --- grammar --------------------------------------------------------------

    def parse(self) -> RuleBlock:
        stack = [_OpenBlock()]
        while (token := self._next()) is not None:
            kind = token.kind
            gap = self._line_before
            top = stack[-1]
            if kind is TokenKind.BRACE_CLOSE:
                if len(stack) == 1:
                    raise ParseError(
                        ParseErrorKind.UNBALANCED_BRACES,
                        "Unmatched '}' with no open block.",
                        token.span,
                    )
                block = stack.pop().close(token.span, token)
                stack[-1].children.append(block)
            elif kind is TokenKind.SEMICOLON:
                continue
            elif kind is TokenKind.PROPERTY:
                top.declarations.append(self._declaration(token, top))
            elif kind is TokenKind.BRACE_OPEN:
                stack.append(self._open([], token, top, gap))
            elif kind in HEADER_KINDS:
                header = [token]
                if kind is not TokenKind.SELECTOR and self._peek_kind() is TokenKind.SELECTOR:
                    header.append(self._next())
                if self._peek_kind() is TokenKind.BRACE_OPEN:
                    stack.append(self._open(header, self._next(), top, gap))
                elif kind is TokenKind.AT_KEYWORD:
                    top.declarations.append(self._at_statement(header))
                else:
                    raise ParseError(
                        ParseErrorKind.MALFORMED_DECLARATION,
                        f"Expected ':' or '{{' after {_join(header)!r}.",
                        header[0].span.to(header[-1].span),
                    )
            else:
                raise ParseError(
                    ParseErrorKind.MALFORMED_DECLARATION,
                    f"Unexpected {kind.value} {token.raw!r}.",
                    token.span,
                )

        if len(stack) > 1:
            unclosed = stack[1]
            raise ParseError(
                ParseErrorKind.UNBALANCED_BRACES,
                f"Block {unclosed.selector!r} is never closed.",
                unclosed.open_brace or unclosed.start,
            )
        return stack[0].close(self._end)

    def _open(
        self, header: list[Token], brace: Token, parent: _OpenBlock, gap: int
    ) -> _OpenBlock:
        first = header[0] if header else brace
        at_keyword = None
        if header and header[0].kind is TokenKind.AT_KEYWORD:
            at_keyword = header[0].raw[1:]
        return _OpenBlock(
            selector=_join(header) if header else "",
            start=first.span,
            selector_span=header[0].span.to(header[-1].span) if header else None,
            blank_line_before=self._has_blank_line(gap, first.line),
            at_keyword=at_keyword,
            open_brace=brace.span,
            depth=parent.depth + 1,
            indent=first.indent,
        )

    def _declaration(self, prop: Token, block: _OpenBlock) -> Declaration:
        if block.depth == 0 and not prop.raw.startswith("$"):
            raise ParseError(
                ParseErrorKind.DECLARATION_OUTSIDE_BLOCK,
                f"Declaration {prop.raw!r} is not inside any block.",
                prop.span,
            )
        colon = self._next()
        if colon is None or colon.kind is not TokenKind.COLON:
            raise ParseError(
                ParseErrorKind.MALFORMED_DECLARATION,
                f"Expected ':' after property {prop.raw!r}.",
                prop.span,
            )
        value = self._next() if self._peek_kind() is TokenKind.VALUE else None
        semicolon = self._next() if self._peek_kind() is TokenKind.SEMICOLON else None
        last = semicolon or value or colon
        return Declaration(
            property=prop.raw,
            value=value.raw if value else "",
            span=prop.span.to(last.span),
            colon=colon.span,
            value_span=value.span if value else None,
            has_semicolon=semicolon is not None,
            indent=prop.indent,
        )

    def _at_statement(self, header: list[Token]) -> Declaration:
        keyword = header[0]
        value = self._next() if self._peek_kind() is TokenKind.VALUE else None
        semicolon = self._next() if self._peek_kind() is TokenKind.SEMICOLON else None
        last = semicolon or value or keyword
        return Declaration(
            property=keyword.raw,
            value=value.raw if value else "",
            span=keyword.span.to(last.span),
            value_span=value.span if value else None,
            has_semicolon=semicolon is not None,
            indent=keyword.indent,
        )


def parse_tokens(tokens: Iterable[Token]) -> RuleBlock:
    """Build the RuleBlock tree for one file from its token stream."""
    return _Parser(tokens).parse()


def parse_stylesheet(source: str) -> RuleBlock:
    """Tokenize and parse *source* into its root RuleBlock.

    Raises :class:`LexError` or :class:`ParseError` for malformed input.
    """
    return parse_tokens(tokenize(source))
