"""Turn graph for the agent runner."""

from .builder import build_turn_graph
from .state import TurnOutcome, TurnState

__all__ = ["build_turn_graph", "TurnOutcome", "TurnState"]
