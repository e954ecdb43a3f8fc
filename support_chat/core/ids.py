from __future__ import annotations
import re
import secrets

_SESSION_ID_RE = re.compile(r"^chat_[A-Za-z0-9_-]{16}$")

def _tok(nbytes: int = 12) -> str:
    return secrets.token_urlsafe(nbytes)

def new_session_id() -> str:
    return f"chat_{_tok()}"

def is_session_id(value: object) -> bool:
    """True if value has the shape produced by new_session_id()."""
    return isinstance(value, str) and bool(_SESSION_ID_RE.match(value))
