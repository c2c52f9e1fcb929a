"""Exception hierarchy for grammar-driven XML parsing."""

from typing import Iterable, Optional


class XmlGrammarError(Exception):
    """Base exception for all errors raised by xml_grammar_parser."""


class ConfigurationError(XmlGrammarError, ValueError):
    """Raised when a grammar description is malformed.

    Raised synchronously while the grammar is being built, never during a
    parse.
    """

    def __init__(self, message: str, invalid_fields: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.invalid_fields = sorted(invalid_fields or [])


class MalformedDocumentError(XmlGrammarError):
    """Raised when the tokenizer reports that the document is not well-formed."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None
    ):
        super().__init__(message)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        message = super().__str__()
        if self.line is None:
            return message
        return f"{message} (line {self.line}, column {self.column})"
