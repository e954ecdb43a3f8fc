from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from support_chat.db.repositories import SessionRepo
from support_chat.db.schemas import ChatSession
from support_chat.graph.build_graph import build_graph
from support_chat.graph.nodes import TurnPipeline
from support_chat.llms.response_generator import ResponseGenerator
from support_chat.session.context import ContextWindowBuilder
from support_chat.session.schemas import Pagination, SendMessageResult, SessionPage
from support_chat.session.validation import (
    validate_initial_title,
    validate_message,
    validate_page,
    validate_session_id,
    validate_title,
)

logger = logging.getLogger(__name__)

# Upper bound on graph steps per write attempt (4 nodes + router).
_STEPS_PER_ATTEMPT = 5


class ConversationOrchestrator:
    """
    Session lifecycle: Empty (0 turns) -> Active (>=1 turn) -> Deleted.

    Holds no per-session state; everything durable lives in the store.
    Input is validated here before any store call is made.
    """

    def __init__(
        self,
        store: SessionRepo,
        generator: ResponseGenerator,
        context_builder: Optional[ContextWindowBuilder] = None,
        *,
        max_write_attempts: int = 3,
    ):
        self.store = store
        self.generator = generator
        self.context_builder = context_builder or ContextWindowBuilder()
        self.pipeline = TurnPipeline(
            store=store,
            context_builder=self.context_builder,
            generator=generator,
            max_write_attempts=max_write_attempts,
        )
        self.graph = build_graph(self.pipeline).compile()

    # ---------- Sessions ----------
    def create_session(self, owner_id: str, title: Optional[str] = None) -> ChatSession:
        session = self.store.create_session(owner_id=owner_id, title=validate_initial_title(title))
        logger.info("Session created", extra={"session_id": session.id, "owner_id": owner_id})
        return session

    def get_session(self, session_id: str, owner_id: str) -> ChatSession:
        return self.store.get_session(validate_session_id(session_id), owner_id)

    def list_sessions(self, owner_id: str, page: int = 1, limit: int = 10) -> SessionPage:
        req = validate_page(page, limit)
        sessions, total = self.store.find_sessions(owner_id, req.page, req.limit)
        return SessionPage(
            sessions=sessions,
            pagination=Pagination.compute(page=req.page, limit=req.limit, total=total),
        )

    def rename_session(self, session_id: str, owner_id: str, title: str) -> ChatSession:
        return self.store.set_title(
            validate_session_id(session_id),
            validate_title(title),
            owner_id=owner_id,
        )

    def delete_session(self, session_id: str, owner_id: str) -> bool:
        deleted = self.store.soft_delete(validate_session_id(session_id), owner_id)
        logger.info("Session deleted", extra={"session_id": session_id, "owner_id": owner_id})
        return deleted

    # ---------- Turns ----------
    def send_message(self, session_id: str, owner_id: str, text: str) -> SendMessageResult:
        """
        Append the user turn and the assistant reply as one exchange.
        Completion failures still produce a (fallback) reply.
        """
        state: Dict[str, Any] = {
            "session_id": validate_session_id(session_id),
            "owner_id": owner_id,
            "text": validate_message(text),
            "attempts": 0,
        }

        recursion_limit = _STEPS_PER_ATTEMPT * self.pipeline.max_write_attempts + 5
        final_state = self.graph.invoke(state, {"recursion_limit": recursion_limit})

        reply = final_state["reply"]
        return SendMessageResult(
            session=final_state["session"],
            user_turn=final_state["user_turn"],
            assistant_turn=final_state["assistant_turn"],
            completion_succeeded=reply.success,
        )
