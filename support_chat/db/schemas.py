from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from typing import List, Literal, Optional
from datetime import datetime

from support_chat.core.clock import as_utc, utc_now

Role = Literal["user", "assistant"]
SessionState = Literal["active", "deleted"]

DEFAULT_TITLE = "New Chat"
MAX_TITLE_CHARS = 100


class Turn(BaseModel):
    role: Role
    content: str = Field(min_length=1)
    timestamp: datetime = Field(default_factory=utc_now)

    @field_validator("content", mode="before")
    @classmethod
    def _strip_content(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("timestamp")
    @classmethod
    def _utc_timestamp(cls, v: datetime) -> datetime:
        return as_utc(v)


class ChatSession(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    owner_id: str
    title: str = Field(default=DEFAULT_TITLE, min_length=1, max_length=MAX_TITLE_CHARS)
    turns: List[Turn] = Field(default_factory=list)
    state: SessionState = "active"
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None
    version: int = 0

    @field_validator("created_at", "updated_at", "deleted_at")
    @classmethod
    def _utc_times(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def message_count(self) -> int:
        return len(self.turns)

    @property
    def is_active(self) -> bool:
        return self.state == "active"


class SessionSummary(BaseModel):
    """Projection used by listings and the stats rollup (no turn bodies)."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    title: str
    updated_at: datetime
    message_count: int = 0

    @field_validator("updated_at")
    @classmethod
    def _utc_updated(cls, v: datetime) -> datetime:
        return as_utc(v)
