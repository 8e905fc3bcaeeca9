from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from chatkeep.schemas.common import require_text


class ProjectCreate(BaseModel):
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    custom_instructions: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return require_text(v, "name")


class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    custom_instructions: Optional[str] = None
    is_archived: Optional[bool] = None
    is_pinned: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return require_text(v, "name")


class ProjectOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    custom_instructions: Optional[str] = None
    is_archived: bool
    is_pinned: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectAnalytics(BaseModel):
    conversation_count: int
    total_messages: int
    total_tokens: int
