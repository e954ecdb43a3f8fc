from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from pydantic import BaseModel

from support_chat.db.schemas import Turn
from support_chat.llms.prompt_registry import FALLBACK_RESPONSES, render_system_prompt

logger = logging.getLogger(__name__)

Picker = Callable[[Sequence[str]], str]


class CompletionBackend(Protocol):
    def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> str:
        ...


@dataclass(frozen=True)
class GenerationConfig:
    max_tokens: int = 500
    temperature: float = 0.7
    timeout_s: float = 30.0


class GenerationResult(BaseModel):
    success: bool
    content: str
    error: Optional[str] = None


class ResponseGenerator:
    """
    Turns a context window into an assistant reply.

    generate() never raises: any backend problem (no backend configured,
    network error, timeout, empty/malformed answer) yields one of
    FALLBACK_RESPONSES with success=False.
    """

    def __init__(
        self,
        backend: Optional[CompletionBackend],
        config: Optional[GenerationConfig] = None,
        picker: Optional[Picker] = None,
        fallbacks: Sequence[str] = FALLBACK_RESPONSES,
    ):
        self.backend = backend
        self.config = config or GenerationConfig()
        self.picker: Picker = picker or random.choice
        self.fallbacks = tuple(fallbacks)

    def build_messages(self, turns: Sequence[Turn], owner_id: str) -> List[Dict[str, str]]:
        messages = [{"role": "system", "content": render_system_prompt(owner_id)}]
        messages.extend({"role": t.role, "content": t.content} for t in turns)
        return messages

    def generate(self, turns: Sequence[Turn], owner_id: str) -> GenerationResult:
        if self.backend is None:
            return self._fallback("Completion backend not configured")

        messages = self.build_messages(turns, owner_id)
        try:
            text = self.backend.complete(
                messages,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                timeout=self.config.timeout_s,
            )
        except Exception as e:
            return self._fallback(f"{type(e).__name__}: {e}")

        content = (text or "").strip() if isinstance(text, str) else ""
        if not content:
            return self._fallback("Completion backend returned empty text")
        return GenerationResult(success=True, content=content)

    def _fallback(self, reason: str) -> GenerationResult:
        logger.warning("Completion failed, serving fallback reply: %s", reason)
        return GenerationResult(success=False, content=self.picker(self.fallbacks), error=reason)
