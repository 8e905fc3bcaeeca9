from enum import Enum
from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from chatkeep.schemas.common import require_text


class ArtifactType(str, Enum):
    CODE = "code"
    MERMAID = "mermaid"
    DOCUMENT = "document"
    OTHER = "other"


class ArtifactCreate(BaseModel):
    message_id: int
    type: ArtifactType
    title: str
    content: str
    language: Optional[str] = None
    identifier: Optional[str] = None

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v, info):
        return require_text(v, info.field_name)


class ArtifactEdit(BaseModel):
    content: str
    title: Optional[str] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v):
        return require_text(v, "content")


class ArtifactOut(BaseModel):
    id: int
    conversation_id: int
    message_id: int
    type: str
    title: Optional[str] = None
    identifier: str
    language: Optional[str] = None
    content: str
    version: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
