"""Engine package - the scheduling loop."""

from .engine import Engine, StateListener

__all__ = ["Engine", "StateListener"]
