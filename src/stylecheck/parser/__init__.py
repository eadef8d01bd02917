"""Stylesheet lexer and block parser."""

from stylecheck.parser.errors import (
    LexError,
    LexErrorKind,
    ParseError,
    ParseErrorKind,
    SourceError,
)
from stylecheck.parser.lexer import Lexer, tokenize
from stylecheck.parser.parser import parse_stylesheet, parse_tokens

__all__ = [
    "Lexer",
    "tokenize",
    "parse_tokens",
    "parse_stylesheet",
    "SourceError",
    "LexError",
    "LexErrorKind",
    "ParseError",
    "ParseErrorKind",
]
