"""Parser API for grammar-driven XML parsing.

Progressive disclosure from module-level functions to a reusable parser
class. Every operation is available in three calling conventions with the
same result semantics:

* direct: ``parse_string(xml)`` returns the result or raises;
* completion callback: ``parse_string(xml, callback=cb)`` calls
  ``cb(None, result)`` or ``cb(error, None)`` and returns ``None``;
* awaitable: ``await parse_string_async(xml)``.
"""

import asyncio
import codecs
import time
from pathlib import Path
from typing import Any, Callable, Optional, Union

from xml_grammar_parser.engine import Engine, EngineStatus
from xml_grammar_parser.grammar import DOCUMENT_EXTRACTOR, build_grammar
from xml_grammar_parser.shared import (
    MalformedDocumentError,
    ParserConfig,
    ParseStatistics,
    XmlGrammarError,
    get_logger,
)
from xml_grammar_parser.tokenization import create_tokenizer

Content = Union[str, bytes]
PathLike = Union[str, Path]
ResultCallback = Callable[[Optional[BaseException], Any], None]

PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000


class XmlGrammarParser:
    """Reusable parser bound to one grammar.

    The grammar is resolved and validated once, at construction; each parse
    then runs on its own engine, so a parser can be reused freely.

    Attributes:
        grammar: Resolved root grammar node
        config: Parser configuration
        last_statistics: Statistics of the most recent completed parse

    Examples:
        Declared grammar:
        >>> def on_address(state):
        ...     state.parent.data["address"] = state.text
        >>> parser = XmlGrammarParser({
        ...     "children": {
        ...         "person": {
        ...             "init": lambda s, name, attrs: s.root.data.update(attrs),
        ...             "children": {"address": {"finish": on_address}},
        ...         }
        ...     }
        ... })

        Convention-based extraction:
        >>> XmlGrammarParser().parse_string("<Machine><Name>M1</Name></Machine>")
        {'machine': {'name': 'M1'}}
    """

    def __init__(
        self,
        grammar: Any = None,
        config: Optional[ParserConfig] = None,
    ) -> None:
        """Initialize parser.

        Args:
            grammar: Grammar node or literal description; ``None`` selects
                convention-based extraction
            config: Parser configuration (defaults to ``ParserConfig()``)

        Raises:
            ConfigurationError: If the grammar description is malformed
        """
        self.config = config or ParserConfig()
        self.grammar = DOCUMENT_EXTRACTOR if grammar is None else build_grammar(grammar)
        self.correlation_id = self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "xml_grammar_parser")
        self.last_statistics: Optional[ParseStatistics] = None

        self._parse_count = 0
        self._successful_parses = 0

    def parse_string(
        self,
        xml: Content,
        callback: Optional[ResultCallback] = None,
    ) -> Any:
        """Parse a document held in memory.

        Args:
            xml: XML content as string or bytes
            callback: Optional completion callback ``callback(error, result)``

        Returns:
            The root state's result, or ``None`` when a callback is given

        Raises:
            MalformedDocumentError: If the document is not well-formed and no
                callback is given
        """
        self.logger.info(
            "Starting string parse operation",
            extra={
                "content_length": len(xml),
                "preview": xml[:PREVIEW_LENGTH] if isinstance(xml, str) else None,
            }
        )
        return self._complete(lambda: self._run(xml), callback)

    def parse_file(
        self,
        path: PathLike,
        callback: Optional[ResultCallback] = None,
    ) -> Any:
        """Parse a document stored in a file.

        A leading UTF-8 byte-order mark is removed before tokenizing when
        ``config.strip_bom`` is set.

        Raises:
            OSError: If the file cannot be read and no callback is given
            MalformedDocumentError: If the document is not well-formed and no
                callback is given
        """
        self.logger.info("Starting file parse operation", extra={"file_path": str(path)})
        return self._complete(lambda: self._run(self._read_document(path)), callback)

    async def parse_string_async(self, xml: Content) -> Any:
        """Awaitable form of :meth:`parse_string`."""
        return self.parse_string(xml)

    async def parse_file_async(self, path: PathLike) -> Any:
        """Awaitable form of :meth:`parse_file`; the file is read in an executor."""
        self.logger.info("Starting async file parse operation", extra={"file_path": str(path)})
        loop = asyncio.get_running_loop()
        content = await loop.run_in_executor(None, self._read_document, path)
        return self._run(content)

    def _complete(self, operation: Callable[[], Any], callback: Optional[ResultCallback]) -> Any:
        if callback is None:
            return operation()
        try:
            result = operation()
        except (XmlGrammarError, OSError) as e:
            self.logger.error(
                "Parse failed",
                extra={"error_type": type(e).__name__},
                exc_info=False,
            )
            callback(e, None)
            return None
        callback(None, result)
        return None

    def _read_document(self, path: PathLike) -> str:
        data = Path(path).read_bytes()
        if self.config.strip_bom and data.startswith(codecs.BOM_UTF8):
            data = data[len(codecs.BOM_UTF8):]
        try:
            return data.decode(self.config.encoding)
        except UnicodeDecodeError as e:
            self.logger.warning(
                "Document cannot be decoded",
                extra={"file_path": str(path), "encoding": self.config.encoding, "offset": e.start}
            )
            raise MalformedDocumentError(
                f"Cannot decode document as {self.config.encoding}: {e.reason} at byte {e.start}"
            ) from e

    def _run(self, content: Content) -> Any:
        start_time = time.time()
        self._parse_count += 1

        engine = Engine(self.grammar, correlation_id=self.correlation_id)
        tokenizer = create_tokenizer(self.config.backend, engine, self.correlation_id)
        engine.start()

        chunk_size = self.config.chunk_size
        for offset in range(0, len(content), chunk_size):
            tokenizer.write(content[offset:offset + chunk_size])
        tokenizer.end()

        if engine.status is not EngineStatus.DONE:
            raise MalformedDocumentError("Document ended before its root element was closed")

        self._successful_parses += 1
        self.last_statistics = engine.statistics

        self.logger.info(
            "Parse completed",
            extra={
                "elements": engine.statistics.elements_opened,
                "max_depth": engine.statistics.max_depth,
                "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
                "backend": self.config.backend.value,
            }
        )
        return engine.result

    @property
    def statistics(self) -> dict:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }


def parse_string(
    xml: Content,
    grammar: Any = None,
    config: Optional[ParserConfig] = None,
    callback: Optional[ResultCallback] = None,
) -> Any:
    """Parse XML from a string with an optional grammar.

    Examples:
        >>> parse_string("<Plant><ListOfMachines><Machine><DisplayName>M1"
        ...              "</DisplayName></Machine></ListOfMachines></Plant>")
        {'plant': {'machines': [{'displayName': 'M1'}]}}
    """
    return XmlGrammarParser(grammar, config).parse_string(xml, callback)


def parse_file(
    path: PathLike,
    grammar: Any = None,
    config: Optional[ParserConfig] = None,
    callback: Optional[ResultCallback] = None,
) -> Any:
    """Parse XML from a file with an optional grammar."""
    return XmlGrammarParser(grammar, config).parse_file(path, callback)


async def parse_string_async(
    xml: Content,
    grammar: Any = None,
    config: Optional[ParserConfig] = None,
) -> Any:
    """Awaitable form of :func:`parse_string`."""
    return await XmlGrammarParser(grammar, config).parse_string_async(xml)


async def parse_file_async(
    path: PathLike,
    grammar: Any = None,
    config: Optional[ParserConfig] = None,
) -> Any:
    """Awaitable form of :func:`parse_file`."""
    return await XmlGrammarParser(grammar, config).parse_file_async(path)
