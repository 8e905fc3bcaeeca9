"""
Conversation and project templates: snapshots that can be turned back into
new conversations or projects.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from chatkeep.config import settings
from chatkeep.errors import NotFound
from chatkeep.models.conversation import Conversation
from chatkeep.models.message import Message
from chatkeep.models.project import Project
from chatkeep.models.template import ConversationTemplate, ProjectTemplate
from chatkeep.models.user import User
from chatkeep.schemas.template import ConversationTemplateCreate, ProjectTemplateCreate
from chatkeep.services.conversation_service import get_conversation
from chatkeep.services.project_service import ensure_name_free, get_project
from chatkeep.services.prompt_service import DEFAULT_CATEGORY
from chatkeep.utils.token import estimate_tokens

logger = logging.getLogger(__name__)


def _visible(db: Session, model, user: User) -> List:
    return db.query(model).filter(
        or_(model.user_id == user.id, model.is_public == True)  # noqa: E712
    ).order_by(model.created_at.desc(), model.id.desc()).all()


def _get(db: Session, model, template_id: int):
    template = db.query(model).filter(model.id == template_id).first()
    if not template:
        raise NotFound("Template not found")
    return template


def list_conversation_templates(db: Session, user: User) -> List[ConversationTemplate]:
    return _visible(db, ConversationTemplate, user)


def create_conversation_template(db: Session, user: User, data: ConversationTemplateCreate) -> ConversationTemplate:
    conversation = get_conversation(db, data.conversation_id)
    messages = db.query(Message).filter(
        Message.conversation_id == conversation.id
    ).order_by(Message.created_at.asc(), Message.id.asc()).all()

    template = ConversationTemplate(
        user_id=user.id,
        name=data.name,
        description=data.description or "",
        category=data.category or DEFAULT_CATEGORY,
        is_public=data.is_public,
        template_structure={
            "title": conversation.title,
            "model": conversation.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        },
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    logger.info(f"Saved conversation {conversation.id} as template {template.id}")
    return template


def use_conversation_template(db: Session, user: User, template_id: int) -> Conversation:
    """
    Start a new conversation from a template.

    The conversation, its messages, the cached counters and the template's
    usage count are committed together.
    """
    template = _get(db, ConversationTemplate, template_id)
    structure = template.template_structure or {}
    model = structure.get("model") or settings.DEFAULT_MODEL
    now = datetime.utcnow()

    conversation = Conversation(
        user_id=user.id,
        title=structure.get("title") or template.name,
        model=model,
        last_message_at=now,
        created_at=now,
        updated_at=now,
    )
    db.add(conversation)
    db.flush()

    parent_id: Optional[int] = None
    total_tokens = 0
    entries = structure.get("messages") or []
    for entry in entries:
        tokens = estimate_tokens(entry["content"], model)
        message = Message(
            conversation_id=conversation.id,
            role=entry["role"],
            content=entry["content"],
            tokens=tokens,
            parent_message_id=parent_id,
            created_at=now,
        )
        db.add(message)
        db.flush()
        parent_id = message.id
        total_tokens += tokens

    conversation.message_count = len(entries)
    conversation.token_count = total_tokens
    template.usage_count = (template.usage_count or 0) + 1
    db.commit()
    db.refresh(conversation)
    logger.info(f"Created conversation {conversation.id} from template {template.id}")
    return conversation


def delete_conversation_template(db: Session, template_id: int) -> None:
    db.delete(_get(db, ConversationTemplate, template_id))
    db.commit()


def list_project_templates(db: Session, user: User) -> List[ProjectTemplate]:
    return _visible(db, ProjectTemplate, user)


def create_project_template(db: Session, user: User, data: ProjectTemplateCreate) -> ProjectTemplate:
    project = get_project(db, data.project_id)
    template = ProjectTemplate(
        user_id=user.id,
        name=data.name,
        description=data.description or "",
        category=data.category or DEFAULT_CATEGORY,
        is_public=data.is_public,
        template_structure={
            "name": project.name,
            "description": project.description,
            "color": project.color,
            "custom_instructions": project.custom_instructions,
        },
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


def use_project_template(db: Session, user: User, template_id: int, name: Optional[str] = None) -> Project:
    template = _get(db, ProjectTemplate, template_id)
    structure = template.template_structure or {}
    project_name = name or structure.get("name") or template.name
    ensure_name_free(db, user.id, project_name)

    project = Project(
        user_id=user.id,
        name=project_name,
        description=structure.get("description") or "",
        color=structure.get("color") or settings.DEFAULT_PROJECT_COLOR,
        custom_instructions=structure.get("custom_instructions") or "",
    )
    db.add(project)
    template.usage_count = (template.usage_count or 0) + 1
    db.commit()
    db.refresh(project)
    logger.info(f"Created project {project.id} from template {template.id}")
    return project


def delete_project_template(db: Session, template_id: int) -> None:
    db.delete(_get(db, ProjectTemplate, template_id))
    db.commit()
