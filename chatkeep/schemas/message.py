from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Literal, Dict
from datetime import datetime

from chatkeep.schemas.common import require_text


class ImageDescriptor(BaseModel):
    media_type: str
    data: Optional[str] = None  # base64 payload
    url: Optional[str] = None
    name: Optional[str] = None

    @model_validator(mode="after")
    def has_source(self):
        if not self.data and not self.url:
            raise ValueError("image needs either data or url")
        return self


class MessageCreate(BaseModel):
    role: Literal["user", "assistant", "system"] = "user"
    content: str
    images: Optional[List[ImageDescriptor]] = None
    tokens: Optional[int] = Field(None, ge=0)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v):
        return require_text(v, "content")


class MessageEdit(BaseModel):
    content: str
    create_branch: bool = False

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v):
        return require_text(v, "content")


class MessageOut(BaseModel):
    id: int
    conversation_id: int
    role: str
    content: str
    images: Optional[List[ImageDescriptor]] = None
    tokens: Optional[int] = None
    parent_message_id: Optional[int] = None
    created_at: datetime
    edited_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageEditResult(BaseModel):
    message: MessageOut
    branched: bool
    original_message_id: int


class BranchOption(BaseModel):
    message_id: int
    role: str
    preview: str
    created_at: datetime


class BranchPoint(BaseModel):
    parent_id: Optional[int] = None
    branches: List[BranchOption]


class BranchesOut(BaseModel):
    branches: List[BranchPoint]
    messages_by_parent: Dict[str, List[int]]
