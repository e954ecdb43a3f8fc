from __future__ import annotations

from support_chat.db.schemas import Turn

TITLE_MAX_CHARS = 50
TITLE_ELLIPSIS = "..."


def build_user_turn(text: str) -> Turn:
    return Turn(role="user", content=text)


def build_assistant_turn(text: str) -> Turn:
    return Turn(role="assistant", content=text)


def derive_title(first_user_message: str) -> str:
    """
    First 50 characters of the opening message, with "..." appended
    only when something was cut off.
    """
    head = first_user_message[:TITLE_MAX_CHARS]
    if len(head) < len(first_user_message):
        return head + TITLE_ELLIPSIS
    return head
