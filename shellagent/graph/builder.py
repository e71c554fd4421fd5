"""Factory for assembling the per-turn LangGraph state machine."""

from __future__ import annotations

from typing import Optional

from langgraph.graph import END, START, StateGraph

from shellagent.graph.nodes import (
    build_budget_node,
    build_guard_node,
    build_propose_node,
    build_respond_node,
    build_stream_node,
)
from shellagent.graph.nodes.types import Emit, Transition
from shellagent.graph.routing import budget_route, guard_route, respond_route, stream_route
from shellagent.graph.state import TurnState
from shellagent.hitl.approval_checker import CommandApprovalChecker
from shellagent.runtime.collaborators import PromptBuilder, ResponseParser, StreamingModelClient
from shellagent.runtime.duplicate_guard import DuplicateCommandGuard
from shellagent.runtime.session_store import SessionStore


def build_turn_graph(
    *,
    store: SessionStore,
    prompt_builder: PromptBuilder,
    model_client: StreamingModelClient,
    parser: ResponseParser,
    transition: Transition,
    emit: Emit,
    output_cap: int = 4000,
    marker: str = "JSON:",
    guard: Optional[DuplicateCommandGuard] = None,
    approval_checker: Optional[CommandApprovalChecker] = None,
    auto_approve: bool = False,
):
    """Compose the graph for one model round-trip.

        START → budget → stream → respond → guard → propose → END
                  ↑                            │
                  └──────── retry ─────────────┘

    budget, stream and respond exit to END when the session finishes,
    fails or is closed. guard exits to END when a repeat survives its
    correction.
    """

    # ========== Build nodes ==========
    budget_node = build_budget_node(store=store, transition=transition)

    stream_node = build_stream_node(
        store=store,
        prompt_builder=prompt_builder,
        model_client=model_client,
        transition=transition,
        emit=emit,
        output_cap=output_cap,
        marker=marker,
    )

    respond_node = build_respond_node(store=store, parser=parser, transition=transition, emit=emit)

    guard_node = build_guard_node(
        store=store,
        guard=guard or DuplicateCommandGuard(),
        transition=transition,
        emit=emit,
    )

    propose_node = build_propose_node(
        store=store,
        transition=transition,
        emit=emit,
        approval_checker=approval_checker,
        auto_approve=auto_approve,
    )

    # ========== Build graph ==========
    graph = StateGraph(TurnState)

    graph.add_node("budget", budget_node)
    graph.add_node("stream", stream_node)
    graph.add_node("respond", respond_node)
    graph.add_node("guard", guard_node)
    graph.add_node("propose", propose_node)

    graph.add_edge(START, "budget")

    graph.add_conditional_edges(
        "budget",
        budget_route,
        {
            "continue": "stream",
            "end": END,
        }
    )

    graph.add_conditional_edges(
        "stream",
        stream_route,
        {
            "streamed": "respond",
            "end": END,
        }
    )

    graph.add_conditional_edges(
        "respond",
        respond_route,
        {
            "proposed": "guard",
            "end": END,
        }
    )

    graph.add_conditional_edges(
        "guard",
        guard_route,
        {
            "retry": "budget",    # Corrective note queued, new model call
            "clear": "propose",
            "stop": END,
        }
    )

    # ========== Exit ==========
    graph.add_edge("propose", END)

    # ========== Compile ==========
    return graph.compile()
