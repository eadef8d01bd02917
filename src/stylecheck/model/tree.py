"""Stylesheet tree model: RuleBlock and Declaration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from stylecheck.model.span import Span


@dataclass(frozen=True)
class Declaration:
    """A ``property: value;`` pair, or an at-statement such as ``@include x;``.

    At-statements use the at-keyword as ``property`` (``"@include"``) and
    have no colon.
    """

    property: str
    value: str
    span: Span
    colon: Span | None = None
    value_span: Span | None = None
    has_semicolon: bool = True
    indent: str | None = None

    @property
    def is_at_statement(self) -> bool:
        return self.property.startswith("@")

    @property
    def is_variable(self) -> bool:
        return self.property.startswith("$")

    @property
    def is_custom_property(self) -> bool:
        return self.property.startswith("--")


@dataclass(frozen=True)
class RuleBlock:
    """A selector with its declarations and nested blocks.

    The root of every parsed file is a synthetic block with an empty selector,
    depth 0 and no braces.
    """

    selector: str
    span: Span
    selector_span: Span | None = None
    declarations: tuple[Declaration, ...] = ()
    children: tuple[RuleBlock, ...] = ()
    blank_line_before: bool = False
    at_keyword: str | None = None  # "media", "include", ... for at-rule blocks
    open_brace: Span | None = None
    close_brace: Span | None = None
    depth: int = 0
    indent: str | None = None
    close_indent: str | None = None

    @property
    def is_root(self) -> bool:
        return self.depth == 0

    @property
    def nested(self) -> bool:
        """True for ``&``-prefixed selectors, which are not expanded."""
        return self.selector.startswith("&")

    @property
    def is_at_rule(self) -> bool:
        return self.at_keyword is not None

    def walk(self) -> Iterator[RuleBlock]:
        """Yield this block and every descendant, depth first in source order."""
        yield self
        for child in self.children:
            yield from child.walk()
