from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from chatkeep.schemas.conversation import ConversationOut
from chatkeep.schemas.message import MessageOut
from chatkeep.schemas.artifact import ArtifactOut


class ShareCreate(BaseModel):
    expires_in_days: Optional[int] = Field(None, ge=1, le=365)


class ShareOut(BaseModel):
    id: int
    conversation_id: int
    share_token: str
    share_url: str
    is_public: bool
    view_count: int
    created_at: datetime
    expires_at: Optional[datetime] = None


class SharedSnapshot(BaseModel):
    conversation: ConversationOut
    messages: List[MessageOut]
    artifacts: List[ArtifactOut]
    view_count: int
    is_public: bool
