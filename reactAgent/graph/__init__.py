"""Graph assembly exports."""

from .builder import build_dialogue_graph, recursion_limit_for
from .state import LoopState

__all__ = ["build_dialogue_graph", "recursion_limit_for", "LoopState"]
