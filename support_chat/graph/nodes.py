from __future__ import annotations

import logging
from typing import Any, Dict

from support_chat.app.errors import ConcurrentUpdateError
from support_chat.db.repositories import SessionRepo
from support_chat.llms.response_generator import ResponseGenerator
from support_chat.session.context import ContextWindowBuilder
from support_chat.session.turn_builder import build_assistant_turn, build_user_turn, derive_title

logger = logging.getLogger(__name__)


class TurnPipeline:
    """
    Node functions for one send-message exchange.

    State keys:
      in:  session_id, owner_id, text
      out: session, user_turn, context, reply, assistant_turn
      bookkeeping: attempts, conflict
    """

    def __init__(
        self,
        store: SessionRepo,
        context_builder: ContextWindowBuilder,
        generator: ResponseGenerator,
        max_write_attempts: int = 3,
    ):
        self.store = store
        self.context_builder = context_builder
        self.generator = generator
        self.max_write_attempts = max(1, max_write_attempts)

    def load_session(self, state: Dict[str, Any]) -> Dict[str, Any]:
        # Re-read on every attempt so ownership, state and version are current.
        state["session"] = self.store.get_session(state["session_id"], state["owner_id"])
        state["user_turn"] = build_user_turn(state["text"])
        state["conflict"] = False
        return state

    def build_context(self, state: Dict[str, Any]) -> Dict[str, Any]:
        session = state["session"]
        state["context"] = self.context_builder.build([*session.turns, state["user_turn"]])
        return state

    def generate_reply(self, state: Dict[str, Any]) -> Dict[str, Any]:
        state["reply"] = self.generator.generate(state["context"], state["owner_id"])
        return state

    def persist_turns(self, state: Dict[str, Any]) -> Dict[str, Any]:
        session = state["session"]
        user_turn = state["user_turn"]
        assistant_turn = build_assistant_turn(state["reply"].content)

        # Title is derived only on the 0 -> 2 transition.
        title = derive_title(user_turn.content) if session.message_count + 2 == 2 else None

        try:
            updated = self.store.append_turns(
                session.id,
                [user_turn, assistant_turn],
                owner_id=state["owner_id"],
                expected_version=session.version,
                title=title,
            )
        except ConcurrentUpdateError:
            attempts = int(state.get("attempts") or 0) + 1
            if attempts >= self.max_write_attempts:
                raise
            logger.warning(
                "Concurrent update on session, retrying exchange",
                extra={"session_id": session.id, "attempt": attempts},
            )
            state["attempts"] = attempts
            state["conflict"] = True
            return state

        state["session"] = updated
        state["assistant_turn"] = assistant_turn
        state["conflict"] = False
        return state
