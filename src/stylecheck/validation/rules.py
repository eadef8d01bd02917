"""Style rules for parsed stylesheets.

Each rule is a function taking the root RuleBlock of one file and returning
a list of Violation objects. Rules never share state, so any subset of them
can run in any order without changing each other's results.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterator

from stylecheck.model.diagnostic import Severity, Violation
from stylecheck.model.span import Span
from stylecheck.model.tree import Declaration, RuleBlock
from stylecheck.validation.categories import Category, category_of

RuleFunc = Callable[[RuleBlock], list[Violation]]


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_STRING_RE = re.compile(r"""'(?:\\.|[^'\\\n])*'|"(?:\\.|[^"\\\n])*\"""")
_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_STRING_OR_LINE_COMMENT_RE = re.compile(rf"(?P<string>{_STRING_RE.pattern})|//[^\n]*")
_URL_RE = re.compile(r"url\([^)]*\)", re.IGNORECASE)
_CALC_RE = re.compile(r"calc\([^()]*(?:\([^()]*\)[^()]*)*\)", re.IGNORECASE)

_LENGTH_UNITS = "px|em|rem|ex|ch|vw|vh|vmin|vmax|cm|mm|in|pt|pc|q"
_ZERO_UNIT_RE = re.compile(
    rf"(?:(?<![\w.$#-])[+-]|(?<![\w.$#+-]))(?:0+(?:\.0*)?|\.0+)(?:{_LENGTH_UNITS})\b",
    re.IGNORECASE,
)
_HEX_RE = re.compile(r"#([0-9a-fA-F]+)(?![\w-])")

_CLASS_RE = re.compile(r"\.(-?[_a-zA-Z][\w-]*)")
_WORD = r"[a-z0-9]+(?:-[a-z0-9]+)*"
_BEM_CLASS_RE = re.compile(rf"{_WORD}(?:__{_WORD})?(?:--{_WORD})?")
_BEM_SUFFIX_RE = re.compile(rf"(?:-[a-z0-9]+)*(?:__{_WORD})?(?:--{_WORD})?")
_AMP_SUFFIX_RE = re.compile(r"&([_-][\w-]*)")
_BAD_UNDERSCORE_RE = re.compile(r"(?<!_)_(?!_)|_{3,}")
_BAD_DASHES_RE = re.compile(r"-{3,}")

# At-rule blocks that continue the block before them: `} @else {`.
_CONTINUATION_KEYWORDS = frozenset({"else", "elseif"})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _violation(rule: str, message: str, span: Span) -> Violation:
    return Violation(rule=rule, severity=Severity.ERROR, message=message, span=span)


def _blank_out(text: str, *patterns: re.Pattern[str]) -> str:
    """Replace every match of *patterns* with spaces, keeping offsets intact."""
    for pattern in patterns:
        text = pattern.sub(lambda m: " " * len(m.group()), text)
    return text


def _blank_line_comments(text: str) -> str:
    """Blank ``//`` comments, leaving strings that contain ``//`` alone."""
    return _STRING_OR_LINE_COMMENT_RE.sub(
        lambda m: m.group() if m.group("string") else " " * len(m.group()), text
    )


def _declarations(root: RuleBlock) -> Iterator[Declaration]:
    for block in root.walk():
        yield from block.declarations


def _valued(root: RuleBlock) -> Iterator[tuple[Declaration, Span]]:
    """Declarations that have a value, with the value's span."""
    for decl in _declarations(root):
        if decl.value_span is not None:
            yield decl, decl.value_span


# ---------------------------------------------------------------------------
# Whitespace and layout rules
# ---------------------------------------------------------------------------


def check_blank_line_between_selectors(root: RuleBlock) -> list[Violation]:
    """Sibling blocks must be separated by a blank line.

    ``@else`` blocks continue the preceding ``@if`` and are exempt.
    """
    violations: list[Violation] = []
    for block in root.walk():
        for child in block.children[1:]:
            if child.at_keyword in _CONTINUATION_KEYWORDS:
                continue
            if not child.blank_line_before:
                selector = child.selector or "{"
                violations.append(
                    _violation(
                        "BlankLineBetweenSelectors",
                        f"Expected a blank line before {selector!r}.",
                        child.selector_span or child.open_brace or child.span,
                    )
                )
    return violations


def check_space_before_brace(root: RuleBlock) -> list[Violation]:
    """A selector must be followed by a space before ``{``."""
    violations: list[Violation] = []
    for block in root.walk():
        selector, brace = block.selector_span, block.open_brace
        if selector is None or brace is None:
            continue
        if selector.end_line == brace.line and selector.end_column == brace.column:
            violations.append(
                _violation(
                    "SpaceBeforeBrace",
                    f"Expected a space between {block.selector!r} and '{{'.",
                    brace,
                )
            )
    return violations


def check_space_around_colon(root: RuleBlock) -> list[Violation]:
    """A declaration colon must be followed by whitespace.

    A space before the colon is never required.
    """
    violations: list[Violation] = []
    for decl, value in _valued(root):
        colon = decl.colon
        if colon is None:
            continue
        if value.line == colon.end_line and value.column == colon.end_column:
            violations.append(
                _violation(
                    "SpaceAroundColon",
                    f"Expected a space after ':' in {decl.property!r}.",
                    colon,
                )
            )
    return violations


def check_one_declaration_per_line(root: RuleBlock) -> list[Violation]:
    violations: list[Violation] = []
    for block in root.walk():
        for prev, decl in zip(block.declarations, block.declarations[1:]):
            if decl.span.line == prev.span.end_line:
                violations.append(
                    _violation(
                        "OneDeclarationPerLine",
                        f"{decl.property!r} shares line {decl.span.line} with "
                        f"{prev.property!r}; put each declaration on its own line.",
                        decl.span,
                    )
                )
    return violations


def check_trailing_semicolon(root: RuleBlock) -> list[Violation]:
    """Every declaration, including the last in its block, ends with ``;``."""
    violations: list[Violation] = []
    for block in root.walk():
        for index, decl in enumerate(block.declarations):
            if decl.has_semicolon:
                continue
            last = index == len(block.declarations) - 1
            where = "last declaration" if last else "declaration"
            violations.append(
                _violation(
                    "TrailingSemicolon",
                    f"Missing ';' after {where} {decl.property!r}.",
                    decl.span,
                )
            )
    return violations


def check_indentation(root: RuleBlock) -> list[Violation]:
    """Line-leading items are indented with one tab per nesting level."""
    violations: list[Violation] = []

    def check(indent: str | None, depth: int, span: Span, what: str) -> None:
        if indent is None:
            return
        where = Span(span.line, 1, span.line, span.column)
        if indent.strip("\t"):
            message = f"Indent {what} with tabs, not spaces."
        elif len(indent) != depth:
            message = f"Expected {depth} tab(s) before {what}, found {len(indent)}."
        else:
            return
        violations.append(_violation("Indentation", message, where))

    for block in root.walk():
        for decl in block.declarations:
            check(decl.indent, block.depth, decl.span, repr(decl.property))
        for child in block.children:
            check(child.indent, block.depth, child.span, repr(child.selector or "{"))
            if child.close_brace is not None:
                check(child.close_indent, block.depth, child.close_brace, "'}'")
    return violations


# ---------------------------------------------------------------------------
# Value rules
# ---------------------------------------------------------------------------


def check_property_order(root: RuleBlock) -> list[Violation]:
    """Properties follow Display, Position, BoxModel, ColorTypography, Other.

    Variables, custom properties and at-statements are not ordered.
    Unknown properties count as Other.
    """
    violations: list[Violation] = []
    for block in root.walk():
        highest: Declaration | None = None
        highest_category = Category.DISPLAY
        for decl in block.declarations:
            if decl.is_at_statement or decl.is_variable or decl.is_custom_property:
                continue
            category = category_of(decl.property)
            if highest is not None and category < highest_category:
                violations.append(
                    _violation(
                        "PropertyOrderCategory",
                        f"{decl.property!r} ({category.label}) should come before "
                        f"{highest.property!r} ({highest_category.label}).",
                        decl.span,
                    )
                )
            elif highest is None or category > highest_category:
                highest, highest_category = decl, category
    return violations


def check_shorthand_zero_unit(root: RuleBlock) -> list[Violation]:
    """Zero lengths are written ``0``, not ``0px``."""
    violations: list[Violation] = []
    for decl, span in _valued(root):
        if decl.is_custom_property:
            continue
        text = _blank_out(
            decl.value, _COMMENT_RE, _STRING_RE, _URL_RE, _CALC_RE, _LINE_COMMENT_RE
        )
        for match in _ZERO_UNIT_RE.finditer(text):
            violations.append(
                _violation(
                    "ShorthandZeroUnit",
                    f"Zero value {match.group()!r} should not have a unit; use '0'.",
                    span.sub(decl.value, match.start(), match.end()),
                )
            )
    return violations


def check_color_case_and_shorthand(root: RuleBlock) -> list[Violation]:
    """Hex colors are lowercase and use the 3-digit form when possible."""
    violations: list[Violation] = []
    for decl, span in _valued(root):
        text = _blank_out(decl.value, _COMMENT_RE, _STRING_RE, _URL_RE, _LINE_COMMENT_RE)
        for match in _HEX_RE.finditer(text):
            digits = match.group(1)
            if len(digits) not in (3, 4, 6, 8):
                continue
            problems = []
            fixed = digits.lower()
            if digits != fixed:
                problems.append("uppercase digits")
            if len(fixed) == 6 and fixed[0::2] == fixed[1::2]:
                problems.append("reducible to 3 digits")
                fixed = fixed[0::2]
            if problems:
                violations.append(
                    _violation(
                        "ColorCaseAndShorthand",
                        f"Hex color {match.group()!r} should be written "
                        f"'#{fixed}' ({', '.join(problems)}).",
                        span.sub(decl.value, match.start(), match.end()),
                    )
                )
    return violations


def check_quote_style(root: RuleBlock) -> list[Violation]:
    """Strings and attribute values use double quotes.

    A single-quoted string that itself contains a double quote is allowed.
    """
    violations: list[Violation] = []

    def scan(text: str, span: Span) -> None:
        for match in _STRING_RE.finditer(_blank_line_comments(_blank_out(text, _COMMENT_RE))):
            literal = match.group()
            if literal.startswith("'") and '"' not in literal:
                violations.append(
                    _violation(
                        "QuoteStyle",
                        f"Use double quotes instead of single quotes: {literal}.",
                        span.sub(text, match.start(), match.end()),
                    )
                )

    for block in root.walk():
        if block.selector_span is not None:
            scan(block.selector, block.selector_span)
        for decl in block.declarations:
            if decl.value_span is not None:
                scan(decl.value, decl.value_span)
    return violations


# ---------------------------------------------------------------------------
# Naming rules
# ---------------------------------------------------------------------------


def _naming_problem(name: str, pattern: re.Pattern[str] = _BEM_CLASS_RE) -> str | None:
    """Why *name* is not a valid block(__element)(--modifier) name, if it is not."""
    if pattern.fullmatch(name):
        return None
    if _BAD_UNDERSCORE_RE.search(name):
        return "element separator must be exactly '__'"
    if name.count("__") > 1:
        return "only one '__' element separator is allowed"
    if _BAD_DASHES_RE.search(name):
        return "modifier prefix must be exactly '--'"
    if name.count("--") > 1:
        return "only one '--' modifier is allowed"
    return "names must be lowercase words joined by single hyphens"


def check_naming_convention(root: RuleBlock) -> list[Violation]:
    """Class names follow ``block(__element)(--modifier)``.

    ``&__x`` and ``&--x`` suffixes of nested selectors are checked as the
    element and modifier parts of their parent's name. At-rule headers and
    selectors built with ``#{}`` interpolation are skipped.
    """
    violations: list[Violation] = []
    for block in root.walk():
        span = block.selector_span
        if span is None or block.is_at_rule or "#{" in block.selector:
            continue
        selector = block.selector
        text = _blank_out(selector, _COMMENT_RE, _STRING_RE, _LINE_COMMENT_RE)

        found = [(m, _naming_problem(m.group(1))) for m in _CLASS_RE.finditer(text)]
        if block.nested:
            suffix = _AMP_SUFFIX_RE.match(text)
            if suffix:
                found.append((suffix, _naming_problem(suffix.group(1), _BEM_SUFFIX_RE)))

        for match, problem in sorted(found, key=lambda item: item[0].start()):
            if problem is None:
                continue
            violations.append(
                _violation(
                    "NamingConvention",
                    f"Class {match.group()!r}: {problem}.",
                    span.sub(selector, match.start(), match.end()),
                )
            )
    return violations


# ---------------------------------------------------------------------------
# Rule registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rule:
    """A registered rule: identifier, check function and default severity."""

    id: str
    check: RuleFunc
    description: str
    severity: Severity = Severity.ERROR


ALL_RULES: tuple[Rule, ...] = (
    Rule(
        "BlankLineBetweenSelectors",
        check_blank_line_between_selectors,
        "Sibling rule blocks are separated by a blank line.",
    ),
    Rule(
        "SpaceBeforeBrace",
        check_space_before_brace,
        "A space separates a selector from its opening brace.",
    ),
    Rule(
        "SpaceAroundColon",
        check_space_around_colon,
        "A space follows the colon of every declaration.",
    ),
    Rule(
        "OneDeclarationPerLine",
        check_one_declaration_per_line,
        "Each declaration sits on its own line.",
    ),
    Rule(
        "TrailingSemicolon",
        check_trailing_semicolon,
        "Every declaration, including the last in a block, ends with ';'.",
    ),
    Rule(
        "PropertyOrderCategory",
        check_property_order,
        "Properties are ordered Display, Position, BoxModel, ColorTypography, Other.",
    ),
    Rule(
        "ShorthandZeroUnit",
        check_shorthand_zero_unit,
        "Zero lengths are written without a unit.",
    ),
    Rule(
        "ColorCaseAndShorthand",
        check_color_case_and_shorthand,
        "Hex colors are lowercase and shortened to 3 digits when possible.",
    ),
    Rule(
        "QuoteStyle",
        check_quote_style,
        "Strings and attribute values use double quotes.",
    ),
    Rule(
        "NamingConvention",
        check_naming_convention,
        "Class names follow block__element--modifier with lowercase hyphenated words.",
    ),
    Rule(
        "Indentation",
        check_indentation,
        "Indentation is one tab per nesting level.",
    ),
)

RULES_BY_ID: dict[str, Rule] = {rule.id: rule for rule in ALL_RULES}
