from __future__ import annotations

from support_chat.db.repositories import SessionRepo
from support_chat.session.schemas import ChatStats

RECENT_ACTIVITY_LIMIT = 5


class StatsAggregator:
    """Read-only rollups over an owner's active sessions."""

    def __init__(self, store: SessionRepo, recent_limit: int = RECENT_ACTIVITY_LIMIT):
        self.store = store
        self.recent_limit = recent_limit

    def get_stats(self, owner_id: str) -> ChatStats:
        return ChatStats(
            total_sessions=self.store.count_active(owner_id),
            total_messages=self.store.count_turns(owner_id),
            recent_activity=self.store.recent_activity(owner_id, limit=self.recent_limit),
        )
