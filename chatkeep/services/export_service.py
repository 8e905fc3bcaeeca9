"""
Account-wide export. Strictly read-only.
"""
import logging
from collections import defaultdict
from datetime import datetime
from typing import Dict

from sqlalchemy.orm import Session

from chatkeep.models.artifact import Artifact
from chatkeep.models.conversation import Conversation
from chatkeep.models.folder import Folder
from chatkeep.models.message import Message
from chatkeep.models.project import Project
from chatkeep.models.prompt import PromptEntry
from chatkeep.models.user import User
from chatkeep.schemas.artifact import ArtifactOut
from chatkeep.schemas.conversation import ConversationOut
from chatkeep.schemas.export import FullExport
from chatkeep.schemas.folder import FolderOut
from chatkeep.schemas.message import MessageOut
from chatkeep.schemas.project import ProjectOut
from chatkeep.schemas.prompt import PromptOut
from chatkeep.schemas.user import UserOut

logger = logging.getLogger(__name__)

EXPORT_FORMAT_VERSION = "1.0"


def build_full_export(db: Session, user: User) -> FullExport:
    """
    Collect the user's profile, projects, folders, prompts and every stored
    conversation with its messages and artifacts nested.

    Archived and soft-deleted conversations are included (with their flags);
    statistics are computed from the nested arrays.
    """
    conversations = db.query(Conversation).filter(
        Conversation.user_id == user.id
    ).order_by(Conversation.created_at.desc(), Conversation.id.desc()).all()
    conversation_ids = [c.id for c in conversations]

    messages_by_conv = defaultdict(list)
    artifacts_by_conv = defaultdict(list)
    if conversation_ids:
        for message in db.query(Message).filter(
            Message.conversation_id.in_(conversation_ids)
        ).order_by(Message.created_at.asc(), Message.id.asc()):
            messages_by_conv[message.conversation_id].append(MessageOut.model_validate(message))
        for artifact in db.query(Artifact).filter(
            Artifact.conversation_id.in_(conversation_ids)
        ).order_by(Artifact.identifier.asc(), Artifact.version.asc()):
            artifacts_by_conv[artifact.conversation_id].append(ArtifactOut.model_validate(artifact))

    exported = []
    for conversation in conversations:
        entry: Dict = ConversationOut.model_validate(conversation).model_dump()
        entry["messages"] = messages_by_conv[conversation.id]
        entry["artifacts"] = artifacts_by_conv[conversation.id]
        exported.append(entry)

    projects = db.query(Project).filter(Project.user_id == user.id).order_by(Project.created_at.desc()).all()
    folders = db.query(Folder).filter(Folder.user_id == user.id).order_by(Folder.created_at.desc()).all()
    prompts = db.query(PromptEntry).filter(PromptEntry.user_id == user.id).order_by(PromptEntry.created_at.desc()).all()

    export = FullExport(
        export_metadata={
            "export_date": datetime.utcnow(),
            "version": EXPORT_FORMAT_VERSION,
            "app_name": "chatkeep",
        },
        user=UserOut.model_validate(user),
        projects=[ProjectOut.model_validate(p) for p in projects],
        folders=[FolderOut.model_validate(f) for f in folders],
        prompts=[PromptOut.model_validate(p) for p in prompts],
        conversations=exported,
        statistics={
            "total_conversations": len(exported),
            "total_messages": sum(len(c["messages"]) for c in exported),
            "total_artifacts": sum(len(c["artifacts"]) for c in exported),
            "total_projects": len(projects),
            "total_folders": len(folders),
            "total_prompts": len(prompts),
        },
    )
    logger.info(f"Exported {export.statistics.total_conversations} conversations for user {user.id}")
    return export
