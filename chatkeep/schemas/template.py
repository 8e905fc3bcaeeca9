from pydantic import BaseModel, field_validator
from typing import Optional, Dict, Any
from datetime import datetime

from chatkeep.schemas.common import require_text


class ConversationTemplateCreate(BaseModel):
    conversation_id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    is_public: bool = False

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return require_text(v, "name")


class ProjectTemplateCreate(BaseModel):
    project_id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    is_public: bool = False

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return require_text(v, "name")


class ProjectTemplateUse(BaseModel):
    name: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return require_text(v, "name")


class TemplateOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    template_structure: Dict[str, Any]
    category: Optional[str] = None
    is_public: bool
    usage_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
