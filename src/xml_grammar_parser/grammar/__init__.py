"""Grammar layer for grammar-driven XML parsing.

Key Components:
    GrammarNode: Immutable description of how one element type is handled
    ReaderState: Live activation of a grammar node for one element
    GenericExtractor: Convention-based fallback building dict/list trees
    PojoGrammar: Grammar-compatible node delegating to the generic extractor
"""

from .extractor import (
    DOCUMENT_EXTRACTOR,
    ExtractorMode,
    GenericExtractor,
    PojoGrammar,
    ShapeKind,
    ShapeNode,
    lower_first_letter,
)
from .node import GrammarNode, build_grammar, is_grammar_node
from .state import BaseState, ReaderState

__all__ = [
    "DOCUMENT_EXTRACTOR",
    "ExtractorMode",
    "GenericExtractor",
    "PojoGrammar",
    "ShapeKind",
    "ShapeNode",
    "lower_first_letter",
    "GrammarNode",
    "build_grammar",
    "is_grammar_node",
    "BaseState",
    "ReaderState",
]
