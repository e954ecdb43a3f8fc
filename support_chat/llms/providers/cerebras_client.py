from __future__ import annotations

import os
from typing import Dict, List, Optional
from cerebras.cloud.sdk import APITimeoutError, Cerebras

from support_chat.app.errors import CompletionTimeoutError, MalformedCompletionError


class CerebrasLLM:
    """
    Wrapper around Cerebras Cloud SDK.
    Retries are disabled; the caller owns the fallback policy.
    """
    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: str = "llama3.1-8b",
        timeout: float = 30.0,
        client: Optional[Cerebras] = None,
    ):
        self.api_key = api_key or os.environ.get("CEREBRAS_API_KEY")
        self.model = model
        self.client = client or Cerebras(
            api_key=self.api_key,
            timeout=timeout,
            max_retries=0,
            warm_tcp_connection=False,
        )

    def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        max_tokens: int,
        temperature: float,
        timeout: float,
    ) -> str:
        """
        Non-streaming chat completion. Returns the trimmed reply text.
        """
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                max_completion_tokens=max_tokens,
                stream=False,
                timeout=timeout,
            )
        except APITimeoutError as e:
            raise CompletionTimeoutError(f"Completion timed out after {timeout}s") from e

        choices = getattr(resp, "choices", None) or []
        if not choices:
            raise MalformedCompletionError("Completion response has no choices")
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise MalformedCompletionError("Completion response has no text content")
        return content.strip()
