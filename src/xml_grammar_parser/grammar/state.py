"""Runtime state instances.

A state instance is the live activation of a grammar node for one concrete
element occurrence. The engine owns the stack of states; ``parent`` and
``engine`` are plain back-references used for dispatch.
"""

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

if TYPE_CHECKING:
    from xml_grammar_parser.engine.dispatcher import Engine
    from xml_grammar_parser.grammar.node import GrammarNode


class BaseState:
    """Behaviour shared by every state the engine can promote."""

    def __init__(self) -> None:
        self.name: Optional[str] = None
        self.attrs: Dict[str, str] = {}
        self.parent: Optional["BaseState"] = None
        self.engine: Optional["Engine"] = None
        self.chunks: List[str] = []
        self.text = ""

    @property
    def root(self) -> "BaseState":
        """The outermost state of the current parse."""
        state = self
        while state.parent is not None:
            state = state.parent
        return state

    @property
    def result(self) -> Any:
        raise NotImplementedError

    def _on_init(
        self,
        name: Optional[str],
        attrs: Dict[str, str],
        parent: Optional["BaseState"],
        engine: "Engine",
    ) -> None:
        self.name = name
        self.attrs = attrs
        self.parent = parent
        self.engine = engine
        self.chunks = []
        self.text = ""

    def _on_start_element(self, name: str, attrs: Dict[str, str]) -> None:
        raise NotImplementedError

    def _on_end_element(self, name: str) -> None:
        raise NotImplementedError

    def _on_text(self, chunk: str) -> None:
        chunk = chunk.strip()
        if not chunk:
            return
        self.chunks.append(chunk)

    def _on_descendant_end(self, name: str) -> None:
        """Receive the closing notification of an element below this state.

        Each level re-notifies its own parent, so a closing tag reaches every
        ancestor exactly once.
        """
        self._notify_end_element(name)
        if self.parent is not None:
            self.parent._on_descendant_end(name)

    def _notify_end_element(self, name: str) -> None:
        pass


class ReaderState(BaseState):
    """State instance driven by a declared grammar node.

    Callbacks receive the state itself as first argument; ``data`` is the
    per-element scratch area they use to assemble output.
    """

    def __init__(self, grammar: "GrammarNode") -> None:
        super().__init__()
        self.grammar = grammar
        self.data: Dict[str, Any] = {}
        # Elements opened below this state that have no state of their own
        self._open_unhandled = 0

    @property
    def result(self) -> Dict[str, Any]:
        return self.data

    def _on_init(
        self,
        name: Optional[str],
        attrs: Dict[str, str],
        parent: Optional[BaseState],
        engine: "Engine",
    ) -> None:
        super()._on_init(name, attrs, parent, engine)
        self.data = {}
        self._open_unhandled = 0
        if self.grammar.init is not None:
            self.grammar.init(self, name, attrs)

    def _on_start_element(self, name: str, attrs: Dict[str, str]) -> None:
        self.chunks = []
        self.text = ""
        child = self.grammar.children.get(name)
        if child is not None:
            self.engine.promote(child, name, attrs)
            return
        if self.grammar.start_element is not None:
            self.grammar.start_element(self, name, attrs)
            if self.engine.current is not self:
                # The callback handed the element to a new state (start_pojo)
                return
        self._open_unhandled += 1

    def _on_end_element(self, name: str) -> None:
        own_close = name == self.name and self._open_unhandled == 0
        if own_close:
            self.text = "".join(self.chunks)
            self.chunks = []
            if self.grammar.finish is not None:
                self.grammar.finish(self)
        elif self._open_unhandled:
            self._open_unhandled -= 1

        self._notify_end_element(name)
        if self.parent is not None:
            self.parent._on_descendant_end(name)

        if own_close:
            self.engine.demote(self)

    def _notify_end_element(self, name: str) -> None:
        if self.grammar.end_element is not None:
            self.grammar.end_element(self, name)

    def start_pojo(
        self,
        name: str,
        attrs: Dict[str, str],
        on_done: Callable[[str, Any], None],
    ) -> None:
        """Extract the element just opened without a declared grammar.

        Only meaningful from inside a ``start_element`` callback. When the
        element closes, ``on_done(name, value)`` receives its leaf text or the
        object/array inferred from its descendants.
        """
        from xml_grammar_parser.grammar.extractor import PojoGrammar

        def _deliver(parent: Optional[BaseState], element_name: str, value: Any) -> None:
            on_done(element_name, value)

        self.engine.promote(PojoGrammar(on_done=_deliver), name, attrs)

    def __repr__(self) -> str:
        return f"ReaderState(name={self.name!r}, depth_unhandled={self._open_unhandled})"
