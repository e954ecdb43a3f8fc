from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from support_chat.db.schemas import Turn


@dataclass(frozen=True)
class ContextConfig:
    """
    Keep the completion payload bounded regardless of conversation age.
    """
    max_turns: int = 10


class ContextWindowBuilder:
    """
    Read-only view over a session's turns: the most recent `max_turns`,
    oldest first. Role balance is not considered.
    """

    def __init__(self, config: Optional[ContextConfig] = None):
        self.config = config or ContextConfig()

    def build(self, turns: Sequence[Turn]) -> List[Turn]:
        if self.config.max_turns <= 0:
            return []
        # sorted() is stable, so equal timestamps keep their stored order
        ordered = sorted(turns, key=lambda t: t.timestamp)
        return ordered[-self.config.max_turns :]
