from __future__ import annotations

"""
Completion layer:
- prompts + fallback replies
- provider clients
- response generation with fallback policy
"""

from support_chat.llms import prompt_registry, providers, response_generator

__all__ = [
    "prompt_registry",
    "providers",
    "response_generator",
]
