"""Engine layer: the state stack and event dispatch."""

from .dispatcher import Engine, EngineStatus

__all__ = ["Engine", "EngineStatus"]
