"""Tokenizer adapters that turn raw XML into start/end/text events.

Markup scanning is delegated to an existing XML parser; this module only
normalises its callbacks into the event contract the engine consumes:

* ``start_element(name, attrs)``
* ``end_element(name)``
* ``text(chunk)``

Adjacent character data is coalesced into a single ``text`` event delivered
just before the next element event, so entity references such as ``&amp;``
never split a text run.
"""

from typing import Any, Dict, List, Optional, Protocol, Tuple, Union
from xml.parsers import expat

from xml_grammar_parser.shared.config import TokenizerBackend
from xml_grammar_parser.shared.errors import MalformedDocumentError, XmlGrammarError
from xml_grammar_parser.shared.logging import get_logger

Chunk = Union[str, bytes]


class TokenHandler(Protocol):
    """Receiver of tokenizer events."""

    def start_element(self, name: str, attrs: Dict[str, str]) -> None: ...

    def end_element(self, name: str) -> None: ...

    def text(self, chunk: str) -> None: ...


def resolve_namespace(name: str) -> Tuple[Optional[str], str]:
    """Split an element name into namespace part and local tag.

    ``ns:Value`` gives ``("ns", "Value")``; Clark notation ``{uri}Value`` as
    produced by lxml gives ``("uri", "Value")``. Names without either form
    are returned with a ``None`` namespace.
    """
    if name.startswith("{"):
        uri, sep, local = name[1:].partition("}")
        if sep:
            return uri, local
    prefix, sep, local = name.partition(":")
    if sep and prefix:
        return prefix, local
    return None, name


class BaseTokenizer:
    """Common event plumbing for tokenizer backends."""

    backend: TokenizerBackend

    def __init__(self, handler: TokenHandler, correlation_id: Optional[str] = None) -> None:
        self.handler = handler
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tokenizer")
        self._text_parts: List[str] = []
        self._ended = False

    @property
    def ended(self) -> bool:
        return self._ended

    def write(self, chunk: Chunk) -> None:
        """Feed a piece of the document.

        Raises:
            MalformedDocumentError: If the content is not well-formed XML
        """
        if self._ended:
            raise XmlGrammarError("Cannot write to a tokenizer after end()")
        self._feed(chunk)

    def end(self) -> None:
        """Signal the end of the document and flush pending events.

        Raises:
            MalformedDocumentError: If the document is incomplete
        """
        if self._ended:
            return
        self._ended = True
        self._finish()
        self._flush_text()

    def _feed(self, chunk: Chunk) -> None:
        raise NotImplementedError

    def _finish(self) -> None:
        raise NotImplementedError

    def _emit_start(self, name: str, attrs: Dict[str, str]) -> None:
        self._flush_text()
        self.handler.start_element(name, dict(attrs))

    def _emit_end(self, name: str) -> None:
        self._flush_text()
        self.handler.end_element(name)

    def _collect_text(self, data: str) -> None:
        self._text_parts.append(data)

    def _on_markup(self, *args: Any) -> None:
        # Comments and processing instructions end a text run
        self._flush_text()

    def _flush_text(self) -> None:
        if not self._text_parts:
            return
        chunk = "".join(self._text_parts)
        self._text_parts = []
        self.handler.text(chunk)


class ExpatTokenizer(BaseTokenizer):
    """Tokenizer backed by the standard library expat parser.

    Namespace processing is disabled, so prefixed names such as ``uax:Float``
    are reported verbatim even when the prefix is never declared.
    """

    backend = TokenizerBackend.EXPAT

    def __init__(self, handler: TokenHandler, correlation_id: Optional[str] = None) -> None:
        super().__init__(handler, correlation_id)
        self._parser = expat.ParserCreate()
        self._parser.buffer_text = True
        self._parser.StartElementHandler = self._emit_start
        self._parser.EndElementHandler = self._emit_end
        self._parser.CharacterDataHandler = self._collect_text
        self._parser.CommentHandler = self._on_markup
        self._parser.ProcessingInstructionHandler = self._on_markup

    def _feed(self, chunk: Chunk) -> None:
        self._parse(chunk, False)

    def _finish(self) -> None:
        self._parse(b"", True)

    def _parse(self, data: Chunk, final: bool) -> None:
        try:
            self._parser.Parse(data, final)
        except expat.ExpatError as e:
            self.logger.warning(
                "Document is not well-formed",
                extra={"line": e.lineno, "column": e.offset, "code": e.code}
            )
            raise MalformedDocumentError(
                expat.ErrorString(e.code), line=e.lineno, column=e.offset
            ) from e


class _LxmlTarget:
    """Parser target forwarding lxml callbacks to a tokenizer."""

    def __init__(self, tokenizer: "LxmlTokenizer") -> None:
        self._tokenizer = tokenizer

    def start(self, tag: str, attrib: Dict[str, str], nsmap: Any = None) -> None:
        self._tokenizer._emit_start(tag, attrib)

    def end(self, tag: str) -> None:
        self._tokenizer._emit_end(tag)

    def data(self, data: str) -> None:
        self._tokenizer._collect_text(data)

    def comment(self, text: str) -> None:
        self._tokenizer._on_markup(text)

    def pi(self, target: str, data: Optional[str] = None) -> None:
        self._tokenizer._on_markup(target, data)

    def close(self) -> None:
        return None


class LxmlTokenizer(BaseTokenizer):
    """Tokenizer backed by ``lxml.etree.XMLParser`` in target mode.

    lxml resolves namespaces, so element names arrive in Clark notation
    (``{uri}local``) and undeclared prefixes are reported as syntax errors.
    """

    backend = TokenizerBackend.LXML

    def __init__(self, handler: TokenHandler, correlation_id: Optional[str] = None) -> None:
        super().__init__(handler, correlation_id)
        from lxml import etree

        self._etree = etree
        self._parser = etree.XMLParser(
            target=_LxmlTarget(self),
            resolve_entities=False,
            no_network=True,
        )

    def _feed(self, chunk: Chunk) -> None:
        try:
            self._parser.feed(chunk)
        except self._etree.XMLSyntaxError as e:
            raise self._malformed(e) from e

    def _finish(self) -> None:
        try:
            self._parser.close()
        except self._etree.XMLSyntaxError as e:
            raise self._malformed(e) from e

    def _malformed(self, error: Any) -> MalformedDocumentError:
        line, column = error.position
        self.logger.warning(
            "Document is not well-formed",
            extra={"line": line, "column": column}
        )
        return MalformedDocumentError(error.msg, line=line, column=column)


_BACKENDS = {
    TokenizerBackend.EXPAT: ExpatTokenizer,
    TokenizerBackend.LXML: LxmlTokenizer,
}


def create_tokenizer(
    backend: TokenizerBackend,
    handler: TokenHandler,
    correlation_id: Optional[str] = None,
) -> BaseTokenizer:
    """Create a tokenizer for the given backend wired to ``handler``."""
    return _BACKENDS[backend](handler, correlation_id)
