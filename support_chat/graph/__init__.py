from __future__ import annotations

"""
LangGraph send-message pipeline: nodes, topology + routers.
"""

from support_chat.graph import build_graph, nodes, routers

__all__ = [
    "build_graph",
    "nodes",
    "routers",
]
