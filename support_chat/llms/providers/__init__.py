from __future__ import annotations

"""
Completion providers (Cerebras)
"""

from support_chat.llms.providers import cerebras_client

__all__ = [
    "cerebras_client",
]
