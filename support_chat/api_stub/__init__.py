from __future__ import annotations

"""
Callable entrypoints for a transport layer (HTTP, CLI, ...).
"""

from support_chat.api_stub import runner

__all__ = [
    "runner",
]
