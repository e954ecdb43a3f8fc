"""
Test suite for the callable boundary (ChatRunner / build_runner).
"""

from dataclasses import replace

import pytest

from support_chat.api_stub.runner import ChatRunner, build_response_generator, build_runner
from support_chat.app.errors import CredentialError, SessionNotFoundError
from support_chat.app.settings import Settings
from support_chat.db.repositories import SessionRepo
from support_chat.llms.providers.cerebras_client import CerebrasLLM
from support_chat.llms.response_generator import ResponseGenerator

from conftest import FakeBackend


class DictValidator:
    def __init__(self, tokens):
        self.tokens = tokens

    def validate(self, token: str) -> str:
        try:
            return self.tokens[token]
        except KeyError:
            raise CredentialError("Invalid or expired token") from None


@pytest.fixture
def settings() -> Settings:
    return Settings(
        mongo_uri="mongodb://localhost:27017",
        mongo_db="support_chat_test",
        mongo_tls=False,
        cerebras_api_key=None,
        completion_model="llama3.1-8b",
        completion_max_tokens=500,
        completion_temperature=0.7,
        completion_timeout_s=30.0,
        context_window_turns=10,
        max_write_attempts=3,
        log_level="INFO",
    )


@pytest.fixture
def runner(settings: Settings, store: SessionRepo) -> ChatRunner:
    validator = DictValidator({"token-alice": "alice", "token-bob": "bob"})
    generator = ResponseGenerator(FakeBackend(reply="Sure, I can help."))
    return build_runner(validator, settings, store=store, generator=generator)


class TestChatRunner:
    def test_full_flow(self, runner: ChatRunner) -> None:
        created = runner.create_session("token-alice")
        session_id = created["session"]["_id"]

        sent = runner.send_message("token-alice", session_id, "Hi there")

        assert sent["session"]["title"] == "Hi there"
        assert sent["session"]["message_count"] == 2
        assert sent["assistant_turn"]["content"] == "Sure, I can help."
        assert "completion_succeeded" not in sent

        listing = runner.list_sessions("token-alice", page=1, limit=10)
        assert listing["pagination"]["total_sessions"] == 1

        stats = runner.get_stats("token-alice")
        assert stats["stats"]["total_messages"] == 2

        assert runner.delete_session("token-alice", session_id) == {"message": "Chat deleted successfully"}
        with pytest.raises(SessionNotFoundError):
            runner.get_session("token-alice", session_id)

    def test_sessions_are_isolated_per_owner(self, runner: ChatRunner) -> None:
        session_id = runner.create_session("token-alice")["session"]["_id"]

        with pytest.raises(SessionNotFoundError):
            runner.get_session("token-bob", session_id)

    def test_bad_token_never_reaches_store(self, runner: ChatRunner, sessions_collection) -> None:
        with pytest.raises(CredentialError):
            runner.create_session("forged")

        assert sessions_collection.count_documents({}) == 0


class TestBuildResponseGenerator:
    def test_without_key_every_reply_is_fallback(self, settings: Settings) -> None:
        gen = build_response_generator(settings)

        assert gen.backend is None

    def test_with_key_uses_cerebras(self, settings: Settings) -> None:
        gen = build_response_generator(replace(settings, cerebras_api_key="test-key", completion_timeout_s=12.0))

        assert isinstance(gen.backend, CerebrasLLM)
        assert gen.config.timeout_s == 12.0
        assert gen.config.max_tokens == 500
