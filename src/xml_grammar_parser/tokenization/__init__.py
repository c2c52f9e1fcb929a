"""Tokenizer adapters for grammar-driven XML parsing.

Key Components:
    TokenHandler: Protocol of the start/end/text events the engine consumes
    ExpatTokenizer: Standard library backend, prefixes reported verbatim
    LxmlTokenizer: lxml target-parser backend
    create_tokenizer: Factory selecting a backend from configuration
    resolve_namespace: Split prefixed or Clark-notation names
"""

from .tokenizer import (
    BaseTokenizer,
    ExpatTokenizer,
    LxmlTokenizer,
    TokenHandler,
    create_tokenizer,
    resolve_namespace,
)

__all__ = [
    "BaseTokenizer",
    "ExpatTokenizer",
    "LxmlTokenizer",
    "TokenHandler",
    "create_tokenizer",
    "resolve_namespace",
]
