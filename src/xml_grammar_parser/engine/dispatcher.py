"""Event dispatcher driving the stack of reader states.

The engine receives tokenizer events, strips namespace prefixes and forwards
each event to the current state. States ask the engine to ``promote`` a child
state when one of their declared children opens and to ``demote`` themselves
when their own closing tag arrives. When the outermost element closes the
engine switches to ``DONE`` and exposes the root state's result.
"""

import time
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

from xml_grammar_parser.grammar.extractor import DOCUMENT_EXTRACTOR
from xml_grammar_parser.grammar.node import build_grammar
from xml_grammar_parser.grammar.state import BaseState
from xml_grammar_parser.shared.errors import XmlGrammarError
from xml_grammar_parser.shared.logging import get_logger
from xml_grammar_parser.shared.result import ParseStatistics
from xml_grammar_parser.tokenization.tokenizer import resolve_namespace

MS_PER_SECOND = 1000


class EngineStatus(Enum):
    """Lifecycle of a single parse."""

    IDLE = auto()      # No document in progress
    PARSING = auto()   # Root state promoted, events being dispatched
    DONE = auto()      # Outermost element closed, result available


class Engine:
    """Stack machine dispatching parse events to reader states.

    One engine serves exactly one document. The grammar it is given is only
    read, so the same grammar can drive any number of engines.

    Attributes:
        grammar: Root grammar node (the document extractor when none given)
        stack: Previously current states, most recent last
        current: State receiving events
        status: Current lifecycle status
        result: Root state's result once ``status`` is ``DONE``
    """

    def __init__(
        self,
        grammar: Any = None,
        correlation_id: Optional[str] = None,
        on_close: Optional[Callable[[Any], None]] = None,
    ) -> None:
        """Initialize engine.

        Args:
            grammar: Grammar node or literal description; ``None`` selects
                convention-based extraction
            correlation_id: Optional correlation ID for request tracking
            on_close: Called with the result when the document completes

        Raises:
            ConfigurationError: If a literal grammar description is malformed
        """
        self.grammar = DOCUMENT_EXTRACTOR if grammar is None else build_grammar(grammar)
        self.correlation_id = correlation_id
        self.on_close = on_close
        self.logger = get_logger(__name__, correlation_id, "engine")

        self.stack: List[Optional[BaseState]] = []
        self.current: Optional[BaseState] = None
        self.root_state: Optional[BaseState] = None
        self.status = EngineStatus.IDLE
        self.result: Any = None
        self.depth = 0
        self.statistics = ParseStatistics()
        self._start_time = 0.0

    def start(self) -> None:
        """Promote the root grammar and begin accepting events."""
        if self.status is not EngineStatus.IDLE:
            raise XmlGrammarError(f"Engine cannot start from status {self.status.name}")
        self._start_time = time.time()
        self.root_state = self.promote(self.grammar, None, {})
        self.status = EngineStatus.PARSING

    def promote(
        self,
        grammar_node: Any,
        name: Optional[str] = None,
        attrs: Optional[Dict[str, str]] = None,
    ) -> BaseState:
        """Make a new state for ``grammar_node`` current.

        The previous current state is pushed onto the stack and becomes the
        new state's parent.
        """
        state = grammar_node.create_state()
        parent = self.current
        self.stack.append(parent)
        self.current = state
        self.statistics.promotions += 1

        if self.logger.is_debug_enabled():
            self.logger.debug(
                "Promote",
                extra={"element": name, "state": type(state).__name__, "depth": len(self.stack)}
            )

        state._on_init(name, attrs or {}, parent, self)
        return state

    def demote(self, state: BaseState) -> None:
        """Restore the state that was current before ``state`` was promoted."""
        self.current = self.stack.pop()
        self.statistics.demotions += 1

        if self.logger.is_debug_enabled():
            self.logger.debug(
                "Demote",
                extra={"element": state.name, "depth": len(self.stack)}
            )

    def start_element(self, name: str, attrs: Dict[str, str]) -> None:
        if self.status is EngineStatus.IDLE:
            self.start()
        elif self.status is EngineStatus.DONE:
            raise XmlGrammarError(f"Element {name!r} received after document end")

        _, local_name = resolve_namespace(name)
        self.depth += 1
        self.statistics.elements_opened += 1
        self.statistics.max_depth = max(self.statistics.max_depth, self.depth)
        self.current._on_start_element(local_name, attrs)

    def end_element(self, name: str) -> None:
        if self.status is not EngineStatus.PARSING:
            raise XmlGrammarError(f"Closing tag {name!r} received outside a document")

        _, local_name = resolve_namespace(name)
        self.current._on_end_element(local_name)
        self.depth -= 1
        self.statistics.elements_closed += 1
        if self.depth == 0:
            self.close()

    def text(self, chunk: str) -> None:
        chunk = chunk.strip()
        if not chunk or self.status is not EngineStatus.PARSING:
            return
        self.statistics.text_chunks += 1
        self.current._on_text(chunk)

    def close(self) -> None:
        """Finish the document and deliver the root state's result."""
        self.status = EngineStatus.DONE
        self.result = self.root_state.result
        self.statistics.processing_time_ms = (time.time() - self._start_time) * MS_PER_SECOND

        self.logger.debug(
            "Document closed",
            extra={
                "elements": self.statistics.elements_opened,
                "max_depth": self.statistics.max_depth,
                "processing_time_ms": self.statistics.processing_time_ms,
            }
        )

        if self.on_close is not None:
            self.on_close(self.result)
