from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from chatkeep.schemas.common import require_text


class ConversationCreate(BaseModel):
    title: str
    project_id: Optional[int] = None
    model: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v):
        return require_text(v, "title")


class ConversationUpdate(BaseModel):
    title: Optional[str] = None
    project_id: Optional[int] = None
    is_archived: Optional[bool] = None
    is_pinned: Optional[bool] = None
    model: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v):
        return require_text(v, "title")


class ArchiveRequest(BaseModel):
    is_archived: bool = True


class ConversationOut(BaseModel):
    id: int
    title: str
    project_id: Optional[int] = None
    model: str
    is_archived: bool
    is_pinned: bool
    is_deleted: bool
    message_count: int
    token_count: int
    last_message_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
