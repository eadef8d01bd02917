"""Tests for the stylesheet lexer."""

import pytest

from stylecheck.model.span import Span
from stylecheck.model.token import TokenKind
from stylecheck.parser import LexError, LexErrorKind, Lexer, tokenize

K = TokenKind


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _kinds(source: str) -> list[TokenKind]:
    return [t.kind for t in tokenize(source)]


def _raw(source: str, kind: TokenKind) -> list[str]:
    return [t.raw for t in tokenize(source) if t.kind is kind]


# ---------------------------------------------------------------------------
# Basic rules
# ---------------------------------------------------------------------------


class TestSimpleRule:
    def test_token_kinds(self):
        assert _kinds(".a { color: red; }") == [
            K.SELECTOR,
            K.BRACE_OPEN,
            K.PROPERTY,
            K.COLON,
            K.VALUE,
            K.SEMICOLON,
            K.BRACE_CLOSE,
        ]

    def test_raw_text(self):
        tokens = list(tokenize(".a { color: red; }"))
        assert [t.raw for t in tokens] == [".a", "{", "color", ":", "red", ";", "}"]

    def test_spans(self):
        tokens = list(tokenize(".a {\n\tcolor: red;\n}"))
        assert tokens[0].span == Span(1, 1, 1, 3)
        assert tokens[1].span == Span(1, 4, 1, 5)
        assert tokens[2].span == Span(2, 2, 2, 7)
        assert tokens[3].span == Span(2, 7, 2, 8)
        assert tokens[4].span == Span(2, 9, 2, 12)
        assert tokens[-1].span == Span(3, 1, 3, 2)

    def test_line_and_column_properties(self):
        token = list(tokenize("\n  .a {}"))[0]
        assert (token.line, token.column) == (2, 3)

    def test_no_space_declaration(self):
        assert _raw(".a{display:block;}", K.VALUE) == ["block"]
        assert _raw(".a{display:block;}", K.SELECTOR) == [".a"]

    def test_missing_semicolon_before_brace(self):
        assert _kinds(".a { color: red }")[-2:] == [K.VALUE, K.BRACE_CLOSE]

    def test_multiline_selector(self):
        assert _raw(".a,\n.b {\n}", K.SELECTOR) == [".a,\n.b"]

    def test_crlf_is_normalized(self):
        tokens = list(tokenize(".a {\r\n\tcolor: red;\r\n}"))
        assert tokens[2].line == 2
        assert tokens[-1].span == Span(3, 1, 3, 2)

    def test_empty_source(self):
        assert list(tokenize("")) == []
        assert list(tokenize("  \n\t ")) == []


# ---------------------------------------------------------------------------
# Strings, brackets and interpolation
# ---------------------------------------------------------------------------


class TestStrings:
    def test_braces_inside_string_value(self):
        assert _raw('.a { content: "{;}"; }', K.VALUE) == ['"{;}"']

    def test_braces_inside_attribute_selector(self):
        source = 'a[title="x{y}"] { color: red; }'
        assert _raw(source, K.SELECTOR) == ['a[title="x{y}"]']
        assert _kinds(source).count(K.BRACE_OPEN) == 1

    def test_single_quoted_string(self):
        assert _raw(".a { content: 'a;b'; }", K.VALUE) == ["'a;b'"]

    def test_escaped_quote(self):
        assert _raw(r'.a { content: "a\"b"; }', K.VALUE) == [r'"a\"b"']

    def test_semicolon_inside_url(self):
        source = ".a { background: url(data:image/png;base64,xx); }"
        assert _raw(source, K.VALUE) == ["url(data:image/png;base64,xx)"]

    def test_colon_inside_url_is_not_the_property_colon(self):
        source = ".a { background: url(http://x.org/a.png); }"
        assert _raw(source, K.PROPERTY) == ["background"]
        assert _raw(source, K.VALUE) == ["url(http://x.org/a.png)"]

    def test_interpolation_in_selector(self):
        assert _raw(".icon-#{$name} { color: red; }", K.SELECTOR) == [".icon-#{$name}"]


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


class TestComments:
    def test_block_comment(self):
        assert _raw("/* a { b } */\n.a {}", K.COMMENT) == ["/* a { b } */"]

    def test_line_comment(self):
        assert _raw("// note\n.a {}", K.COMMENT) == ["// note"]

    def test_line_comment_ends_declaration(self):
        source = ".a {\n\tcolor: red // note\n}"
        assert _raw(source, K.VALUE) == ["red"]
        assert _raw(source, K.COMMENT) == ["// note"]

    def test_block_comment_inside_value(self):
        assert _raw(".a { color: red /* } */; }", K.VALUE) == ["red /* } */"]

    def test_double_slash_inside_url(self):
        assert _raw(".a { background: url(//cdn.x/a.png); }", K.COMMENT) == []

    def test_line_comment_after_comma_in_selector_list(self):
        source = ".a, // first\n.b {\n}"
        assert _kinds(source) == [K.SELECTOR, K.BRACE_OPEN, K.BRACE_CLOSE]
        assert _raw(source, K.SELECTOR) == [".a, // first\n.b"]

    def test_quote_inside_skipped_comment(self):
        source = ".a, // don't\n.b {\n}"
        assert _raw(source, K.SELECTOR) == [".a, // don't\n.b"]

    def test_line_comment_after_comma_in_value_list(self):
        source = ".a {\n\tfont-family: a, // body\n\t\tb;\n}"
        assert _raw(source, K.VALUE) == ["a, // body\n\t\tb"]
        assert _raw(source, K.COMMENT) == []


# ---------------------------------------------------------------------------
# At-rules and nesting
# ---------------------------------------------------------------------------


class TestAtRules:
    def test_at_rule_block(self):
        source = "@media screen and (max-width: 600px) { }"
        assert _kinds(source)[:3] == [K.AT_KEYWORD, K.SELECTOR, K.BRACE_OPEN]
        assert _raw(source, K.AT_KEYWORD) == ["@media"]
        assert _raw(source, K.SELECTOR) == ["screen and (max-width: 600px)"]

    def test_at_rule_without_prelude(self):
        assert _kinds("@font-face { }")[:2] == [K.AT_KEYWORD, K.BRACE_OPEN]

    def test_at_statement(self):
        assert _kinds("@include clearfix(1px);") == [K.AT_KEYWORD, K.VALUE, K.SEMICOLON]
        assert _raw("@include clearfix(1px);", K.VALUE) == ["clearfix(1px)"]

    def test_variable_declaration(self):
        assert _kinds("$gap: 10px;") == [K.PROPERTY, K.COLON, K.VALUE, K.SEMICOLON]


class TestNesting:
    def test_ampersand_selector(self):
        source = "&:hover { }"
        assert _kinds(source)[:3] == [K.AMPERSAND, K.SELECTOR, K.BRACE_OPEN]
        assert _raw(source, K.SELECTOR) == [":hover"]

    def test_ampersand_suffix(self):
        tokens = list(tokenize("&__slide { }"))
        assert tokens[0].span == Span(1, 1, 1, 2)
        assert tokens[1].raw == "__slide"
        assert tokens[1].span == Span(1, 2, 1, 9)

    def test_pseudo_class_selector_is_not_a_declaration(self):
        assert _kinds("a:hover { }")[:2] == [K.SELECTOR, K.BRACE_OPEN]

    def test_bare_word_is_a_selector_fragment(self):
        assert _kinds(".a { foo }")[2] is K.SELECTOR


# ---------------------------------------------------------------------------
# Indentation
# ---------------------------------------------------------------------------


class TestIndent:
    def test_first_token_on_line_has_indent(self):
        tokens = list(tokenize(".a {\n\tcolor: red;\n}"))
        assert tokens[0].indent == ""
        assert tokens[2].indent == "\t"
        assert tokens[-1].indent == ""

    def test_later_tokens_have_no_indent(self):
        tokens = list(tokenize(".a {\n\tcolor: red;\n}"))
        assert tokens[1].indent is None
        assert tokens[4].indent is None

    def test_space_indent_is_kept(self):
        tokens = list(tokenize(".a {\n    color: red;\n}"))
        assert tokens[2].indent == "    "


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestLexErrors:
    def test_unterminated_string_at_end_of_input(self):
        with pytest.raises(LexError) as exc_info:
            list(tokenize('.a { content: "abc'))
        assert exc_info.value.kind is LexErrorKind.UNTERMINATED_STRING
        assert exc_info.value.span.line == 1
        assert exc_info.value.span.column == 15

    def test_unterminated_string_at_newline(self):
        with pytest.raises(LexError) as exc_info:
            list(tokenize(".a {\n\tcontent: 'abc;\n}\n"))
        assert exc_info.value.kind is LexErrorKind.UNTERMINATED_STRING
        assert exc_info.value.span == Span(2, 11, 2, 16)

    def test_unterminated_comment(self):
        with pytest.raises(LexError) as exc_info:
            list(tokenize(".a {}\n/* never closed"))
        assert exc_info.value.kind is LexErrorKind.UNTERMINATED_COMMENT
        assert (exc_info.value.line, exc_info.value.column) == (2, 1)

    def test_unterminated_comment_inside_statement(self):
        with pytest.raises(LexError) as exc_info:
            list(tokenize(".a { color: red /* oops"))
        assert exc_info.value.kind is LexErrorKind.UNTERMINATED_COMMENT


# ---------------------------------------------------------------------------
# Laziness and restartability
# ---------------------------------------------------------------------------


class TestStream:
    def test_lexer_is_restartable(self):
        lexer = Lexer(".a { color: red; }\n.b { top: 0; }")
        assert list(lexer) == list(lexer)

    def test_tokens_are_produced_lazily(self):
        stream = tokenize(".a { }\n/* never closed")
        first = next(stream)
        assert first.kind is K.SELECTOR
        with pytest.raises(LexError):
            list(stream)

    def test_tokens_are_frozen(self):
        token = next(tokenize(".a {}"))
        with pytest.raises(AttributeError):
            token.raw = ".b"  # type: ignore[misc]
