"""Statistics collected by the engine while dispatching parse events."""

from dataclasses import dataclass


@dataclass
class ParseStatistics:
    """Counters for a single parse."""

    elements_opened: int = 0
    elements_closed: int = 0
    text_chunks: int = 0
    promotions: int = 0
    demotions: int = 0
    max_depth: int = 0
    processing_time_ms: float = 0.0

    @property
    def elements_per_second(self) -> float:
        """Calculate elements processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.elements_opened * 1000.0) / self.processing_time_ms

    @property
    def is_balanced(self) -> bool:
        """Every opened element was closed."""
        return self.elements_opened == self.elements_closed
