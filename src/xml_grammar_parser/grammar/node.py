"""Declarative grammar nodes.

A grammar node describes how one element type is handled: four optional
lifecycle callbacks and a mapping from child element names to further nodes.
Nodes are built once from a nested literal description, validated at that
point, and are read-only afterwards so they can be shared between parses.

Example:
    >>> def address_finish(state):
    ...     state.parent.data["address"] = state.text
    >>> grammar = GrammarNode({
    ...     "children": {
    ...         "person": {
    ...             "init": lambda state, name, attrs: state.data.update(attrs),
    ...             "children": {"address": {"finish": address_finish}},
    ...         }
    ...     }
    ... })
    >>> sorted(grammar.children)
    ['person']
"""

from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

from xml_grammar_parser.grammar.state import ReaderState
from xml_grammar_parser.shared.errors import ConfigurationError

InitCallback = Callable[[ReaderState, str, Dict[str, str]], None]
FinishCallback = Callable[[ReaderState], None]
StartElementCallback = Callable[[ReaderState, str, Dict[str, str]], None]
EndElementCallback = Callable[[ReaderState, str], None]

CALLBACK_FIELDS = ("init", "finish", "start_element", "end_element")
VALID_FIELDS = frozenset(("children",) + CALLBACK_FIELDS)

# Spellings accepted in literal descriptions, mapped to canonical field names
FIELD_ALIASES = {
    "parser": "children",
    "startElement": "start_element",
    "endElement": "end_element",
}


def is_grammar_node(candidate: Any) -> bool:
    """Check whether an object can be promoted by the engine."""
    return callable(getattr(candidate, "create_state", None))


class GrammarNode:
    """Resolved, immutable description of how one element type is handled."""

    __slots__ = (
        "init",
        "finish",
        "start_element",
        "end_element",
        "children",
        "_frozen",
    )

    def __init__(
        self,
        description: Optional[Mapping[str, Any]] = None,
        *,
        init: Optional[InitCallback] = None,
        finish: Optional[FinishCallback] = None,
        start_element: Optional[StartElementCallback] = None,
        end_element: Optional[EndElementCallback] = None,
        children: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Build a node from a literal description and/or keyword arguments.

        Args:
            description: Literal mapping with any of the keys ``children``,
                ``init``, ``finish``, ``start_element``, ``end_element``
            init: Called as ``init(state, name, attrs)`` when the element opens
            finish: Called as ``finish(state)`` when the element closes
            start_element: Called as ``start_element(state, name, attrs)`` for
                opened elements that have no child grammar
            end_element: Called as ``end_element(state, name)`` for every
                closing tag observed by the state, including descendants'
            children: Mapping from element name to child description or node

        Raises:
            ConfigurationError: If the description contains unexpected fields
                or a callback is not callable
        """
        merged = _normalize_description(description or {})
        overrides = {
            "init": init,
            "finish": finish,
            "start_element": start_element,
            "end_element": end_element,
            "children": children,
        }
        for key, value in overrides.items():
            if value is not None:
                merged[key] = value
        memo = {id(description): self} if description is not None else {}
        self._setup(merged, memo)

    def _setup(self, fields: Dict[str, Any], memo: Dict[int, "GrammarNode"]) -> None:
        object.__setattr__(self, "_frozen", False)
        for name in CALLBACK_FIELDS:
            callback = fields.get(name)
            if callback is not None and not callable(callback):
                raise ConfigurationError(
                    f"Grammar field {name!r} must be callable, "
                    f"got {type(callback).__name__}",
                    invalid_fields=[name],
                )
            object.__setattr__(self, name, callback)

        resolved = {}
        for element_name, child in (fields.get("children") or {}).items():
            resolved[element_name] = _resolve(child, memo, element_name)
        object.__setattr__(self, "children", MappingProxyType(resolved))
        object.__setattr__(self, "_frozen", True)

    def __setattr__(self, name: str, value: Any) -> None:
        if getattr(self, "_frozen", False):
            raise AttributeError(f"GrammarNode is immutable; cannot set {name!r}")
        object.__setattr__(self, name, value)

    def create_state(self) -> ReaderState:
        """Create a fresh state instance bound to this node."""
        return ReaderState(self)

    def __repr__(self) -> str:
        callbacks = [name for name in CALLBACK_FIELDS if getattr(self, name)]
        return (
            f"GrammarNode(children={list(self.children)!r}, "
            f"callbacks={callbacks!r})"
        )


def build_grammar(description: Any) -> Any:
    """Resolve a literal description into a grammar node.

    Values that already are grammar nodes are returned unchanged.

    Raises:
        ConfigurationError: If the description is malformed
    """
    return _resolve(description, {}, "<root>")


def _normalize_description(description: Mapping[str, Any]) -> Dict[str, Any]:
    if not isinstance(description, Mapping):
        raise ConfigurationError(
            f"Grammar description must be a mapping, got {type(description).__name__}"
        )
    normalized: Dict[str, Any] = {}
    invalid = []
    for key, value in description.items():
        canonical = FIELD_ALIASES.get(key, key)
        if canonical not in VALID_FIELDS:
            invalid.append(key)
            continue
        if canonical in normalized:
            raise ConfigurationError(
                f"Grammar field {canonical!r} given more than once",
                invalid_fields=[key],
            )
        normalized[canonical] = value
    if invalid:
        raise ConfigurationError(
            "Invalid fields detected in grammar description: "
            + ", ".join(sorted(invalid)),
            invalid_fields=invalid,
        )
    return normalized


def _resolve(description: Any, memo: Dict[int, GrammarNode], element_name: str) -> Any:
    if is_grammar_node(description):
        return description
    if not isinstance(description, Mapping):
        raise ConfigurationError(
            f"Grammar entry for {element_name!r} must be a mapping or a grammar "
            f"node, got {type(description).__name__}"
        )
    # Literal descriptions referenced more than once (or recursively) resolve
    # to a single shared node.
    key = id(description)
    if key in memo:
        return memo[key]
    node = object.__new__(GrammarNode)
    memo[key] = node
    node._setup(_normalize_description(description), memo)
    return node
