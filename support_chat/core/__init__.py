from __future__ import annotations

"""
This module provides core functionality for the application.

It includes utilities for clock operations and ID generation.
"""

from support_chat.core import clock, ids

__all__ = [
    "clock",
    "ids",
]
