from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from chatkeep.schemas.common import require_text


class FolderCreate(BaseModel):
    name: str
    project_id: Optional[int] = None
    parent_folder_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return require_text(v, "name")


class FolderUpdate(BaseModel):
    name: Optional[str] = None
    position: Optional[int] = None
    parent_folder_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v):
        return require_text(v, "name")


class FolderOut(BaseModel):
    id: int
    name: str
    project_id: Optional[int] = None
    parent_folder_id: Optional[int] = None
    position: int
    created_at: datetime

    class Config:
        from_attributes = True


class FolderItemCreate(BaseModel):
    conversation_id: int


class FolderItemOut(BaseModel):
    id: int
    folder_id: int
    conversation_id: int

    class Config:
        from_attributes = True
