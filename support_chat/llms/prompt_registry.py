from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Prompt:
    name: str
    template: str


PROMPTS: Dict[str, Prompt] = {
    "support_assistant": Prompt(
        name="support_assistant",
        template=(
            "You are a helpful AI customer support assistant. You should:\n"
            "- Be friendly, professional, and helpful\n"
            "- Provide accurate and concise responses\n"
            "- Ask clarifying questions when needed\n"
            "- Escalate complex issues to human support when appropriate\n"
            "- Keep responses under 200 words unless detailed explanation is needed\n"
            "\n"
            "Current user ID: {owner_id}"
        ),
    ),
}

# Served verbatim when the completion backend cannot answer.
FALLBACK_RESPONSES: Tuple[str, ...] = (
    "I apologize, but I'm experiencing technical difficulties. Please try again in a moment.",
    "I'm having trouble processing your request right now. Could you please rephrase your question?",
    "I'm temporarily unavailable. Please try again later or contact our support team directly.",
)


def get_prompt(name: str) -> str:
    if name not in PROMPTS:
        raise KeyError(f"Unknown prompt: {name}")
    return PROMPTS[name].template


def render_system_prompt(owner_id: str) -> str:
    return get_prompt("support_assistant").format(owner_id=owner_id)
