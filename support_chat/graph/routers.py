from __future__ import annotations
from typing import Any, Dict, Literal

Route = Literal["load_session", "done"]


def route_after_persist(state: Dict[str, Any]) -> Route:
    """
    Write lost a version race -> reload and redo the exchange.
    The retry budget is enforced in persist_turns, which re-raises once spent.
    """
    if state.get("conflict"):
        return "load_session"
    return "done"
