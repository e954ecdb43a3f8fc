from __future__ import annotations

from langgraph.graph import StateGraph, START, END

from support_chat.graph.nodes import TurnPipeline
from support_chat.graph.routers import route_after_persist


def build_graph(pipeline: TurnPipeline) -> "StateGraph":
    """
    Send-message graph:
    - START -> load_session -> build_context -> generate_reply -> persist_turns
    - persist_turns -> (load_session on version conflict, else END)
    """
    g = StateGraph(dict)  # state is a Dict[str, Any]

    g.add_node("load_session", pipeline.load_session)
    g.add_node("build_context", pipeline.build_context)
    g.add_node("generate_reply", pipeline.generate_reply)
    g.add_node("persist_turns", pipeline.persist_turns)

    g.add_edge(START, "load_session")
    g.add_edge("load_session", "build_context")
    g.add_edge("build_context", "generate_reply")
    g.add_edge("generate_reply", "persist_turns")

    g.add_conditional_edges(
        "persist_turns",
        route_after_persist,
        {
            "load_session": "load_session",
            "done": END,
        },
    )

    return g
