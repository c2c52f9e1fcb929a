"""Public parsing API."""

from .parser import (
    XmlGrammarParser,
    parse_file,
    parse_file_async,
    parse_string,
    parse_string_async,
)

__all__ = [
    "XmlGrammarParser",
    "parse_file",
    "parse_file_async",
    "parse_string",
    "parse_string_async",
]
