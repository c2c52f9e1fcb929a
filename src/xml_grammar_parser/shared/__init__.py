"""Shared utilities for grammar-driven XML parsing.

This module provides configuration objects, the exception hierarchy, result
statistics and logging helpers used across all layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    TokenizerBackend,
)
from .errors import (
    ConfigurationError,
    MalformedDocumentError,
    XmlGrammarError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import ParseStatistics

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "TokenizerBackend",
    "ConfigurationError",
    "MalformedDocumentError",
    "XmlGrammarError",
    "CorrelationLogger",
    "get_logger",
    "ParseStatistics",
]
