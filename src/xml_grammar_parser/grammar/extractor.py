"""Convention-based extraction without a declared grammar.

Element names decide the output shape:

* ``ListOfMachines`` opens an array stored under ``machines``;
* any other element opens an object stored under its name with the first
  letter lowercased (``DisplayName`` -> ``displayName``);
* an element with no children and non-empty text becomes a string leaf.

Example:
    ``<Plant><ListOfMachines><Machine><DisplayName>M1</DisplayName></Machine>
    </ListOfMachines></Plant>`` yields
    ``{"plant": {"machines": [{"displayName": "M1"}]}}``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from xml_grammar_parser.grammar.state import BaseState

LIST_PREFIX = "ListOf"

PojoCallback = Callable[[Optional[BaseState], str, Any], None]


def lower_first_letter(name: str) -> str:
    """Lowercase the first character of ``name``, leaving the rest unchanged."""
    return name[:1].lower() + name[1:]


class ShapeKind(Enum):
    """Shape of an output node, fixed when the node is created."""

    OBJECT = "object"
    ARRAY = "array"


class ExtractorMode(Enum):
    """Where a generic extractor sits in the document."""

    DOCUMENT = "document"  # root of a grammar-less parse
    ELEMENT = "element"    # promoted for one element already opened


@dataclass(frozen=True)
class ShapeNode:
    """Output node whose kind never changes after creation."""

    kind: ShapeKind
    value: Union[Dict[str, Any], List[Any]] = field(default=None)

    @classmethod
    def create(cls, kind: ShapeKind) -> "ShapeNode":
        return cls(kind, {} if kind is ShapeKind.OBJECT else [])

    @property
    def is_empty(self) -> bool:
        return not self.value

    def attach(self, field_name: str, child: "ShapeNode") -> None:
        if self.kind is ShapeKind.ARRAY:
            self.value.append(child.value)
        else:
            self.value[field_name] = child.value

    def assign_leaf(self, field_name: str, text: str) -> None:
        if self.kind is ShapeKind.ARRAY:
            # Replace the placeholder appended when the element opened
            self.value[-1] = text
        else:
            self.value[field_name] = text


def field_for(element_name: str) -> Tuple[str, ShapeKind]:
    """Derive the field name and shape for an element name."""
    if element_name.startswith(LIST_PREFIX):
        return lower_first_letter(element_name[len(LIST_PREFIX):]), ShapeKind.ARRAY
    return lower_first_letter(element_name), ShapeKind.OBJECT


class GenericExtractor(BaseState):
    """State that builds a plain dict/list tree from element naming conventions."""

    def __init__(
        self,
        mode: ExtractorMode = ExtractorMode.DOCUMENT,
        on_done: Optional[PojoCallback] = None,
    ) -> None:
        super().__init__()
        self.mode = mode
        self.on_done = on_done
        self.value: Any = None
        self._root = ShapeNode.create(ShapeKind.OBJECT)
        self._current = self._root
        self._frames: List[Tuple[ShapeNode, str]] = []

    @property
    def result(self) -> Any:
        if self.mode is ExtractorMode.DOCUMENT:
            return self._root.value
        return self.value

    def _on_init(
        self,
        name: Optional[str],
        attrs: Dict[str, str],
        parent: Optional[BaseState],
        engine: Any,
    ) -> None:
        super()._on_init(name, attrs, parent, engine)
        kind = ShapeKind.OBJECT
        if self.mode is ExtractorMode.ELEMENT and name is not None:
            kind = field_for(name)[1]
        self._root = ShapeNode.create(kind)
        self._current = self._root
        self._frames = []
        self.value = None

    def _on_start_element(self, name: str, attrs: Dict[str, str]) -> None:
        self.chunks = []
        field_name, kind = field_for(name)
        child = ShapeNode.create(kind)
        self._current.attach(field_name, child)
        self._frames.append((self._current, field_name))
        self._current = child

    def _on_end_element(self, name: str) -> None:
        if self.mode is ExtractorMode.ELEMENT and not self._frames:
            self._finish_element(name)
            return

        closed = self._current
        self._current, field_name = self._frames.pop()
        text = "".join(self.chunks)
        self.chunks = []
        if text and closed.is_empty:
            self._current.assign_leaf(field_name, text)

        if self.parent is not None:
            self.parent._on_descendant_end(name)

    def _finish_element(self, name: str) -> None:
        self.text = "".join(self.chunks)
        self.chunks = []
        if self.text and self._root.is_empty:
            self.value = self.text
        else:
            self.value = self._root.value

        if self.on_done is not None:
            self.on_done(self.parent, name, self.value)
        if self.parent is not None:
            self.parent._on_descendant_end(name)
        self.engine.demote(self)

    def __repr__(self) -> str:
        return f"GenericExtractor(mode={self.mode.value}, name={self.name!r})"


def store_in_parent(parent: Optional[BaseState], name: str, value: Any) -> None:
    """Default delivery: ``parent.data[lowerFirst(name)] = value``."""
    data = getattr(parent, "data", None)
    if data is not None:
        data[lower_first_letter(name)] = value


class PojoGrammar:
    """Grammar-compatible node that extracts its element generically.

    Usable anywhere a grammar node is accepted, typically as an entry of
    ``children``. When the element closes, ``on_done(parent, name, value)`` is
    called; by default the value is stored in the parent state's ``data``.
    """

    __slots__ = ("on_done", "mode")

    def __init__(
        self,
        on_done: Optional[PojoCallback] = None,
        mode: ExtractorMode = ExtractorMode.ELEMENT,
    ) -> None:
        self.on_done = on_done or store_in_parent
        self.mode = mode

    def create_state(self) -> GenericExtractor:
        return GenericExtractor(self.mode, self.on_done)

    def __repr__(self) -> str:
        return f"PojoGrammar(mode={self.mode.value})"


DOCUMENT_EXTRACTOR = PojoGrammar(mode=ExtractorMode.DOCUMENT)
