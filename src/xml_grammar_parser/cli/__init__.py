"""Command-line interface module for xml-grammar-parser.

This module provides a CLI converting XML files to JSON with convention-based
extraction.
"""

from .main import main

__all__ = ["main"]
