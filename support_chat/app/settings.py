from __future__ import annotations
import os
from dataclasses import dataclass

from support_chat.app.errors import ConfigError

_TRUTHY = {"1", "true", "yes", "y", "on"}


def _get_env(name: str, default: str | None = None) -> str:
    v = os.getenv(name, default)
    if v is None or v == "":
        raise ConfigError(f"Missing required env var: {name}")
    return v


def _get_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower().strip() in _TRUTHY


def _get_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigError(f"Invalid value for {name}: {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    # Mongo
    mongo_uri: str
    mongo_db: str
    mongo_tls: bool

    # Completion backend (Cerebras)
    cerebras_api_key: str | None
    completion_model: str
    completion_max_tokens: int
    completion_temperature: float
    completion_timeout_s: float

    # Orchestration
    context_window_turns: int
    max_write_attempts: int

    log_level: str


def load_settings() -> Settings:
    return Settings(
        mongo_uri=_get_env("MONGO_URI"),
        mongo_db=os.getenv("MONGO_DB", "support_chat"),
        mongo_tls=_get_bool("MONGO_TLS", "true"),
        cerebras_api_key=os.getenv("CEREBRAS_API_KEY") or None,
        completion_model=os.getenv("COMPLETION_MODEL", "llama3.1-8b"),
        completion_max_tokens=_get_number("COMPLETION_MAX_TOKENS", "500", int),
        completion_temperature=_get_number("COMPLETION_TEMPERATURE", "0.7", float),
        completion_timeout_s=_get_number("COMPLETION_TIMEOUT_S", "30", float),
        context_window_turns=_get_number("CONTEXT_WINDOW_TURNS", "10", int),
        max_write_attempts=_get_number("MAX_WRITE_ATTEMPTS", "3", int),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
