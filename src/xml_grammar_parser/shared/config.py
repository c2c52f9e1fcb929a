"""Configuration classes for grammar-driven XML parsing.

The grammar itself is not configuration: it is supplied per parser. This
module covers how documents are read and tokenized.
"""

import codecs
from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, List, Optional


class TokenizerBackend(Enum):
    """Tokenizer implementations that can feed the engine."""

    EXPAT = "expat"   # Standard library expat, prefixes kept verbatim
    LXML = "lxml"     # lxml target parser, names arrive in Clark notation


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError, ValueError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Immutable configuration shared by every parse of a parser instance."""

    backend: TokenizerBackend = TokenizerBackend.EXPAT
    encoding: str = "utf-8"
    strip_bom: bool = True
    chunk_size: int = 65536
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        if isinstance(self.backend, str):
            try:
                object.__setattr__(self, "backend", TokenizerBackend(self.backend))
            except ValueError as e:
                raise ConfigValidationError(
                    f"Unknown tokenizer backend: {self.backend!r}",
                    field_name="backend",
                    suggestions=[backend.value for backend in TokenizerBackend],
                ) from e
        if self.chunk_size <= 0:
            raise ConfigValidationError(
                "chunk_size must be > 0", field_name="chunk_size"
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError as e:
            raise ConfigValidationError(
                f"Unknown encoding: {self.encoding!r}", field_name="encoding"
            ) from e

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides."""
        data = self.to_dict()
        data.update(kwargs)
        return ParserConfig.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-compatible dictionary."""
        data = asdict(self)
        data["backend"] = self.backend.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from a dictionary.

        Raises:
            ConfigValidationError: If unknown keys or invalid values are present
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return cls(**data)
