from pydantic import BaseModel, field_validator
from typing import Optional, List
from datetime import datetime

from chatkeep.schemas.common import require_text


class PromptCreate(BaseModel):
    title: str
    prompt_template: str
    description: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = []
    is_public: bool = False

    @field_validator("title", "prompt_template")
    @classmethod
    def not_blank(cls, v, info):
        return require_text(v, info.field_name)


class PromptUpdate(BaseModel):
    title: Optional[str] = None
    prompt_template: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None

    @field_validator("title", "prompt_template")
    @classmethod
    def not_blank(cls, v, info):
        return require_text(v, info.field_name)


class PromptOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    prompt_template: str
    category: Optional[str] = None
    tags: List[str] = []
    is_public: bool
    usage_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, v):
        return v or []


class ExampleMessage(BaseModel):
    role: str
    content: str


class ExampleConversation(BaseModel):
    id: str
    title: str
    description: str
    category: str
    icon: str
    messages: List[ExampleMessage]
