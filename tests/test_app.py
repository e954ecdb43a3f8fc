import json
import logging

import pytest

from support_chat.app.errors import ConfigError
from support_chat.app.logging import JsonFormatter
from support_chat.app.settings import load_settings
from support_chat.graph.routers import route_after_persist


class TestLoadSettings:
    def test_missing_mongo_uri(self, monkeypatch) -> None:
        monkeypatch.delenv("MONGO_URI", raising=False)

        with pytest.raises(ConfigError):
            load_settings()

    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.setenv("MONGO_URI", "mongodb://localhost:27017")
        for name in (
            "MONGO_DB",
            "MONGO_TLS",
            "CEREBRAS_API_KEY",
            "COMPLETION_MAX_TOKENS",
            "COMPLETION_TEMPERATURE",
            "COMPLETION_TIMEOUT_S",
            "CONTEXT_WINDOW_TURNS",
            "MAX_WRITE_ATTEMPTS",
        ):
            monkeypatch.delenv(name, raising=False)

        s = load_settings()

        assert s.mongo_db == "support_chat"
        assert s.mongo_tls is True
        assert s.cerebras_api_key is None
        assert (s.completion_max_tokens, s.completion_temperature, s.completion_timeout_s) == (500, 0.7, 30.0)
        assert s.context_window_turns == 10
        assert s.max_write_attempts == 3

    def test_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
        monkeypatch.setenv("MONGO_TLS", "off")
        monkeypatch.setenv("COMPLETION_TIMEOUT_S", "12.5")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        s = load_settings()

        assert s.mongo_tls is False
        assert s.completion_timeout_s == 12.5
        assert s.log_level == "DEBUG"

    def test_invalid_number(self, monkeypatch) -> None:
        monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
        monkeypatch.setenv("CONTEXT_WINDOW_TURNS", "ten")

        with pytest.raises(ConfigError):
            load_settings()


class TestJsonFormatter:
    def test_includes_context_fields(self) -> None:
        record = logging.LogRecord("support_chat.test", logging.WARNING, __file__, 1, "retrying %s", ("exchange",), None)
        record.session_id = "chat_AAAAAAAAAAAAAAAA"
        record.attempt = 2

        payload = json.loads(JsonFormatter().format(record))

        assert payload["level"] == "WARNING"
        assert payload["msg"] == "retrying exchange"
        assert payload["session_id"] == "chat_AAAAAAAAAAAAAAAA"
        assert payload["attempt"] == 2
        assert "owner_id" not in payload


class TestRouteAfterPersist:
    def test_conflict_loops_back(self) -> None:
        assert route_after_persist({"conflict": True}) == "load_session"

    def test_success_finishes(self) -> None:
        assert route_after_persist({"conflict": False}) == "done"
