"""
Test suite for CerebrasLLM using a mocked SDK client.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
from cerebras.cloud.sdk import APITimeoutError

from support_chat.app.errors import CompletionTimeoutError, MalformedCompletionError
from support_chat.llms.providers.cerebras_client import CerebrasLLM

MESSAGES = [{"role": "system", "content": "be nice"}, {"role": "user", "content": "hi"}]


def _response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def sdk_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def llm(sdk_client: MagicMock) -> CerebrasLLM:
    return CerebrasLLM(api_key="test-key", model="llama3.1-8b", client=sdk_client)


class TestComplete:
    def test_returns_trimmed_text(self, llm: CerebrasLLM, sdk_client: MagicMock) -> None:
        sdk_client.chat.completions.create.return_value = _response("  Hello!  ")

        assert llm.complete(MESSAGES, max_tokens=500, temperature=0.7, timeout=30.0) == "Hello!"

    def test_forwards_request_parameters(self, llm: CerebrasLLM, sdk_client: MagicMock) -> None:
        sdk_client.chat.completions.create.return_value = _response("ok")

        llm.complete(MESSAGES, max_tokens=500, temperature=0.7, timeout=30.0)

        sdk_client.chat.completions.create.assert_called_once_with(
            model="llama3.1-8b",
            messages=MESSAGES,
            temperature=0.7,
            max_completion_tokens=500,
            stream=False,
            timeout=30.0,
        )

    def test_timeout_is_translated(self, llm: CerebrasLLM, sdk_client: MagicMock) -> None:
        request = httpx.Request("POST", "https://api.cerebras.ai/v1/chat/completions")
        sdk_client.chat.completions.create.side_effect = APITimeoutError(request=request)

        with pytest.raises(CompletionTimeoutError):
            llm.complete(MESSAGES, max_tokens=500, temperature=0.7, timeout=30.0)

    @pytest.mark.parametrize(
        "resp",
        [
            SimpleNamespace(choices=[]),
            SimpleNamespace(choices=None),
            _response(None),
            _response("   "),
        ],
    )
    def test_unusable_response_is_malformed(self, llm: CerebrasLLM, sdk_client: MagicMock, resp) -> None:
        sdk_client.chat.completions.create.return_value = resp

        with pytest.raises(MalformedCompletionError):
            llm.complete(MESSAGES, max_tokens=500, temperature=0.7, timeout=30.0)
