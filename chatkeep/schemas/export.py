from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from chatkeep.schemas.user import UserOut
from chatkeep.schemas.project import ProjectOut
from chatkeep.schemas.conversation import ConversationOut
from chatkeep.schemas.message import MessageOut
from chatkeep.schemas.artifact import ArtifactOut
from chatkeep.schemas.folder import FolderOut
from chatkeep.schemas.prompt import PromptOut


class ExportMetadata(BaseModel):
    export_date: datetime
    version: str
    app_name: str


class ExportedConversation(ConversationOut):
    messages: List[MessageOut]
    artifacts: List[ArtifactOut]


class ExportStatistics(BaseModel):
    total_conversations: int
    total_messages: int
    total_artifacts: int
    total_projects: int
    total_folders: int
    total_prompts: int


class FullExport(BaseModel):
    export_metadata: ExportMetadata
    user: Optional[UserOut] = None
    projects: List[ProjectOut]
    folders: List[FolderOut]
    prompts: List[PromptOut]
    conversations: List[ExportedConversation]
    statistics: ExportStatistics
