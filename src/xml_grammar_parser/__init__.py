"""Grammar-driven XML parser.

Turns XML documents into arbitrary Python object graphs, guided by a
declarative grammar that maps element names to handlers. Without a grammar,
an object/array tree is inferred from element naming conventions.

Progressive API Disclosure:
- Level 1: Simple functions - parse_string(), parse_file() and async forms
- Level 2: Reusable parser - XmlGrammarParser class
- Level 3: Engine - drive the state machine from any event source
"""

__version__ = "0.1.0"
__author__ = "XML Grammar Parser Team"

from .api import (
    XmlGrammarParser,
    parse_file,
    parse_file_async,
    parse_string,
    parse_string_async,
)
from .engine import Engine, EngineStatus
from .grammar import (
    GenericExtractor,
    GrammarNode,
    PojoGrammar,
    ReaderState,
    build_grammar,
    lower_first_letter,
)
from .shared import (
    ConfigurationError,
    MalformedDocumentError,
    ParserConfig,
    TokenizerBackend,
    XmlGrammarError,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse_string",
    "parse_file",
    "parse_string_async",
    "parse_file_async",

    # Level 2: Reusable parser
    "XmlGrammarParser",

    # Level 3: Engine and grammar building blocks
    "Engine",
    "EngineStatus",
    "GrammarNode",
    "ReaderState",
    "GenericExtractor",
    "PojoGrammar",
    "build_grammar",
    "lower_first_letter",

    # Configuration and errors
    "ParserConfig",
    "TokenizerBackend",
    "XmlGrammarError",
    "ConfigurationError",
    "MalformedDocumentError",
]
