from __future__ import annotations

"""
Application-level utilities:
- settings
- logging
- error definitions
- credential validator contract
"""

from support_chat.app import auth, errors, logging, settings

__all__ = [
    "auth",
    "errors",
    "logging",
    "settings",
]
