"""Main CLI entry point for the xml-grammar-parser command-line tool.

Converts XML files to JSON using convention-based extraction: element names
become camelCase fields and ``ListOf*`` wrappers become arrays.
"""

import argparse
import json
import sys
from typing import List, Optional

from xml_grammar_parser import __version__
from xml_grammar_parser.api.parser import XmlGrammarParser
from xml_grammar_parser.shared.config import (
    ConfigValidationError,
    ParserConfig,
    TokenizerBackend,
)
from xml_grammar_parser.shared.errors import MalformedDocumentError

EXIT_OK = 0
EXIT_MALFORMED = 1
EXIT_IO_ERROR = 2


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-grammar-parser",
        description="Convert XML documents to JSON using element naming conventions",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("files", nargs="+", help="XML files to convert")
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )
    parser.add_argument(
        "--backend",
        choices=[backend.value for backend in TokenizerBackend],
        default=TokenizerBackend.EXPAT.value,
        help="Tokenizer backend (default: expat)",
    )
    parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Encoding used to decode input files (default: utf-8)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    arg_parser = create_argument_parser()
    args = arg_parser.parse_args(argv)

    if args.verbose:
        import logging
        logging.basicConfig(level=logging.DEBUG)

    try:
        config = ParserConfig(backend=TokenizerBackend(args.backend), encoding=args.encoding)
    except ConfigValidationError as e:
        arg_parser.error(str(e))
    parser = XmlGrammarParser(config=config)

    exit_code = EXIT_OK
    documents = {}
    for file_name in args.files:
        try:
            documents[file_name] = parser.parse_file(file_name)
        except OSError as e:
            print(f"{file_name}: cannot read file: {e}", file=sys.stderr)
            exit_code = max(exit_code, EXIT_IO_ERROR)
        except MalformedDocumentError as e:
            print(f"{file_name}: {e}", file=sys.stderr)
            exit_code = max(exit_code, EXIT_MALFORMED)

    if len(args.files) == 1:
        output = documents.get(args.files[0])
    else:
        output = documents
    if output is not None:
        print(json.dumps(output, indent=args.indent, ensure_ascii=False))
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
