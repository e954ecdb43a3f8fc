"""
Shared test fixtures.

Provides: in-memory Mongo collection (mongomock), fake completion backend,
wired store / generator / orchestrator / stats instances.
"""

from typing import Any, Dict, List, Optional

import mongomock
import pytest

from support_chat.db.repositories import SessionRepo
from support_chat.llms.response_generator import ResponseGenerator
from support_chat.session.orchestrator import ConversationOrchestrator
from support_chat.session.stats import StatsAggregator


class FakeBackend:
    """Completion backend double that records every call."""

    def __init__(self, reply: str = "Happy to help! What seems to be the problem?", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def complete(self, messages, *, max_tokens, temperature, timeout):
        self.calls.append(
            {
                "messages": messages,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "timeout": timeout,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


def first_option(options):
    """Deterministic fallback picker."""
    return options[0]


@pytest.fixture
def owner_id() -> str:
    return "user_42"


@pytest.fixture
def sessions_collection():
    return mongomock.MongoClient()["support_chat_test"]["chat_sessions"]


@pytest.fixture
def store(sessions_collection) -> SessionRepo:
    return SessionRepo(sessions_collection)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def generator(backend: FakeBackend) -> ResponseGenerator:
    return ResponseGenerator(backend, picker=first_option)


@pytest.fixture
def orchestrator(store: SessionRepo, generator: ResponseGenerator) -> ConversationOrchestrator:
    return ConversationOrchestrator(store=store, generator=generator)


@pytest.fixture
def stats(store: SessionRepo) -> StatsAggregator:
    return StatsAggregator(store)
