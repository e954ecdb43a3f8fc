from __future__ import annotations

import math
from typing import List

from pydantic import BaseModel

from support_chat.db.schemas import ChatSession, SessionSummary, Turn


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_sessions: int
    has_next: bool
    has_prev: bool

    @classmethod
    def compute(cls, *, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit)
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_sessions=total,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class SessionPage(BaseModel):
    sessions: List[ChatSession]
    pagination: Pagination


class SendMessageResult(BaseModel):
    session: ChatSession
    user_turn: Turn
    assistant_turn: Turn
    # False when the assistant turn is a fallback reply
    completion_succeeded: bool


class ChatStats(BaseModel):
    total_sessions: int
    total_messages: int
    recent_activity: List[SessionSummary]
