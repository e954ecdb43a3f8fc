from __future__ import annotations

from typing import Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from support_chat.app.errors import ValidationError
from support_chat.core.ids import is_session_id
from support_chat.db.schemas import DEFAULT_TITLE, MAX_TITLE_CHARS

MAX_MESSAGE_CHARS = 1000
MAX_PAGE_LIMIT = 50

M = TypeVar("M", bound=BaseModel)


class MessageInput(BaseModel):
    # Length is checked on the raw text, emptiness after trimming.
    text: str = Field(max_length=MAX_MESSAGE_CHARS)

    @field_validator("text")
    @classmethod
    def _non_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Message content is required")
        return v


class PageRequest(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=MAX_PAGE_LIMIT)


class TitleInput(BaseModel):
    title: str = Field(min_length=1, max_length=MAX_TITLE_CHARS)

    @field_validator("title", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v


def _validated(model_cls: Type[M], **data) -> M:
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as ve:
        err = ve.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ())) or "input"
        raise ValidationError(f"Invalid {field}: {err.get('msg', 'unknown')}") from ve


def validate_session_id(session_id: object) -> str:
    if not is_session_id(session_id):
        raise ValidationError("Invalid session ID")
    return session_id  # type: ignore[return-value]


def validate_message(text: object) -> str:
    return _validated(MessageInput, text=text).text


def validate_page(page: object, limit: object) -> PageRequest:
    return _validated(PageRequest, page=page, limit=limit)


def validate_title(title: object) -> str:
    return _validated(TitleInput, title=title).title


def validate_initial_title(title: Optional[str]) -> str:
    """Missing or blank titles fall back to the default."""
    if title is None or (isinstance(title, str) and not title.strip()):
        return DEFAULT_TITLE
    return validate_title(title)
