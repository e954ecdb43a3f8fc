from __future__ import annotations
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from support_chat.app.errors import ConcurrentUpdateError, DatabaseError, SessionNotFoundError
from support_chat.core.clock import utc_now
from support_chat.core.ids import new_session_id
from support_chat.db.schemas import DEFAULT_TITLE, ChatSession, SessionSummary, Turn


@contextmanager
def _store_call(op: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as e:
        raise DatabaseError(f"{op} failed: {e}") from e


class SessionRepo:
    """
    Mongo-backed session store. One document per session, turns embedded.

    Every write bumps `version`; writers that pass `expected_version` only
    apply on top of the version they read.
    """

    def __init__(self, sessions: Collection):
        self.sessions = sessions

    # ---------- filters ----------
    @staticmethod
    def _active(session_id: str, owner_id: Optional[str] = None) -> Dict[str, Any]:
        q: Dict[str, Any] = {"_id": session_id, "state": "active"}
        if owner_id is not None:
            q["owner_id"] = owner_id
        return q

    @staticmethod
    def _owned(owner_id: str) -> Dict[str, Any]:
        return {"owner_id": owner_id, "state": "active"}

    # ---------- writes ----------
    def create_session(self, owner_id: str, title: str = DEFAULT_TITLE) -> ChatSession:
        now = utc_now()
        doc = {
            "_id": new_session_id(),
            "owner_id": owner_id,
            "title": title,
            "turns": [],
            "state": "active",
            "created_at": now,
            "updated_at": now,
            "deleted_at": None,
            "version": 0,
        }
        with _store_call("create_session"):
            self.sessions.insert_one(doc)
        return ChatSession.model_validate(doc)

    def append_turn(
        self,
        session_id: str,
        turn: Turn,
        *,
        owner_id: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> ChatSession:
        return self.append_turns(session_id, [turn], owner_id=owner_id, expected_version=expected_version)

    def append_turns(
        self,
        session_id: str,
        turns: Sequence[Turn],
        *,
        owner_id: Optional[str] = None,
        expected_version: Optional[int] = None,
        title: Optional[str] = None,
    ) -> ChatSession:
        """
        Push turns (and optionally a title) in a single atomic update.
        """
        update_set: Dict[str, Any] = {"updated_at": utc_now()}
        if title is not None:
            update_set["title"] = title
        update = {
            "$push": {"turns": {"$each": [t.model_dump() for t in turns]}},
            "$set": update_set,
            "$inc": {"version": 1},
        }
        return self._versioned_update(session_id, update, owner_id=owner_id, expected_version=expected_version)

    def set_title(
        self,
        session_id: str,
        title: str,
        *,
        owner_id: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> ChatSession:
        update = {"$set": {"title": title, "updated_at": utc_now()}, "$inc": {"version": 1}}
        return self._versioned_update(session_id, update, owner_id=owner_id, expected_version=expected_version)

    def soft_delete(self, session_id: str, owner_id: str) -> bool:
        now = utc_now()
        with _store_call("soft_delete"):
            res = self.sessions.update_one(
                self._active(session_id, owner_id),
                {"$set": {"state": "deleted", "deleted_at": now, "updated_at": now}, "$inc": {"version": 1}},
            )
        if res.matched_count == 0:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return True

    def _versioned_update(
        self,
        session_id: str,
        update: Dict[str, Any],
        *,
        owner_id: Optional[str],
        expected_version: Optional[int],
    ) -> ChatSession:
        q = self._active(session_id, owner_id)
        if expected_version is not None:
            q["version"] = expected_version

        with _store_call("update_session"):
            doc = self.sessions.find_one_and_update(q, update, return_document=ReturnDocument.AFTER)
            still_there = (
                doc is None
                and expected_version is not None
                and self.sessions.find_one(self._active(session_id, owner_id), {"_id": 1}) is not None
            )

        if doc is not None:
            return ChatSession.model_validate(doc)
        if still_there:
            raise ConcurrentUpdateError(
                f"Session {session_id} changed since version {expected_version}"
            )
        raise SessionNotFoundError(f"Session not found: {session_id}")

    # ---------- reads ----------
    def get_session(self, session_id: str, owner_id: str) -> ChatSession:
        with _store_call("get_session"):
            doc = self.sessions.find_one(self._active(session_id, owner_id))
        if not doc:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return ChatSession.model_validate(doc)

    def find_sessions(self, owner_id: str, page: int, limit: int) -> Tuple[List[ChatSession], int]:
        """Active sessions of one owner, most recently updated first."""
        skip = (page - 1) * limit
        with _store_call("find_sessions"):
            cur = (
                self.sessions.find(self._owned(owner_id))
                .sort("updated_at", DESCENDING)
                .skip(skip)
                .limit(limit)
            )
            docs = list(cur)
            total = self.sessions.count_documents(self._owned(owner_id))
        return [ChatSession.model_validate(d) for d in docs], total

    # ---------- rollups ----------
    def count_active(self, owner_id: str) -> int:
        with _store_call("count_active"):
            return self.sessions.count_documents(self._owned(owner_id))

    def count_turns(self, owner_id: str) -> int:
        pipeline = [
            {"$match": self._owned(owner_id)},
            {"$project": {"n": {"$size": "$turns"}}},
            {"$group": {"_id": None, "total": {"$sum": "$n"}}},
        ]
        with _store_call("count_turns"):
            rows = list(self.sessions.aggregate(pipeline))
        return int(rows[0]["total"]) if rows else 0

    def recent_activity(self, owner_id: str, limit: int = 5) -> List[SessionSummary]:
        pipeline = [
            {"$match": self._owned(owner_id)},
            {"$sort": {"updated_at": -1}},
            {"$limit": limit},
            {"$project": {"title": 1, "updated_at": 1, "message_count": {"$size": "$turns"}}},
        ]
        with _store_call("recent_activity"):
            rows = list(self.sessions.aggregate(pipeline))
        return [SessionSummary.model_validate(r) for r in rows]
