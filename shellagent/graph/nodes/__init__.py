"""Graph nodes exports."""

from .budget import build_budget_node
from .guard import build_guard_node
from .propose import build_propose_node
from .respond import build_respond_node
from .stream import build_stream_node

__all__ = [
    "build_budget_node",
    "build_stream_node",
    "build_respond_node",
    "build_guard_node",
    "build_propose_node",
]
