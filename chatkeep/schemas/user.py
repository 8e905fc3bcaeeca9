from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional, Dict, Any
from datetime import datetime


class UserOut(BaseModel):
    id: int
    email: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    preferences: Dict[str, Any] = {}
    custom_instructions: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("preferences", mode="before")
    @classmethod
    def default_preferences(cls, v):
        return v or {}


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    avatar_url: Optional[str] = None


class SettingsOut(BaseModel):
    preferences: Dict[str, Any] = {}
    custom_instructions: str = ""


class SettingsUpdate(BaseModel):
    preferences: Optional[Dict[str, Any]] = None
    custom_instructions: Optional[str] = None


class CustomInstructions(BaseModel):
    custom_instructions: Optional[str] = None
