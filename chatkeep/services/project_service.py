"""
Project CRUD and per-project statistics.
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from chatkeep.config import settings
from chatkeep.errors import Conflict, NotFound, ValidationError
from chatkeep.models.conversation import Conversation
from chatkeep.models.folder import Folder
from chatkeep.models.project import Project
from chatkeep.models.user import User
from chatkeep.schemas.project import ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)


def get_project(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFound("Project not found")
    return project


def resolve_project_reference(db: Session, project_id: Optional[int]) -> Optional[int]:
    """Check a project reference carried inside a payload.

    An unresolvable reference is a payload problem, not a missing resource.
    """
    if project_id is None:
        return None
    if not db.query(Project.id).filter(Project.id == project_id).first():
        raise ValidationError(f"Project {project_id} does not exist")
    return project_id


def ensure_name_free(db: Session, user_id: int, name: str, exclude_id: Optional[int] = None):
    query = db.query(Project.id).filter(Project.user_id == user_id, Project.name == name)
    if exclude_id is not None:
        query = query.filter(Project.id != exclude_id)
    if query.first():
        raise Conflict(f"A project named '{name}' already exists")


def list_projects(db: Session, user: User, include_archived: bool = False) -> List[Project]:
    query = db.query(Project).filter(Project.user_id == user.id)
    if not include_archived:
        query = query.filter(Project.is_archived == False)  # noqa: E712
    return query.order_by(Project.is_pinned.desc(), Project.created_at.desc(), Project.id.desc()).all()


def create_project(db: Session, user: User, data: ProjectCreate) -> Project:
    ensure_name_free(db, user.id, data.name)
    project = Project(
        user_id=user.id,
        name=data.name,
        description=data.description,
        color=data.color or settings.DEFAULT_PROJECT_COLOR,
        custom_instructions=data.custom_instructions,
    )
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info(f"Created project {project.id} '{project.name}'")
    return project


def update_project(db: Session, project_id: int, updates: ProjectUpdate) -> Project:
    project = get_project(db, project_id)
    changes = updates.model_dump(exclude_unset=True)
    if changes.get("name") is not None:
        ensure_name_free(db, project.user_id, changes["name"], exclude_id=project.id)
    for key, value in changes.items():
        if value is None and key in ("name", "is_archived", "is_pinned"):
            continue
        setattr(project, key, value)
    db.commit()
    db.refresh(project)
    return project


def delete_project(db: Session, project_id: int) -> None:
    """Delete a project; its conversations and folders become unfiled."""
    project = get_project(db, project_id)
    db.query(Conversation).filter(Conversation.project_id == project.id).update(
        {Conversation.project_id: None}, synchronize_session=False
    )
    db.query(Folder).filter(Folder.project_id == project.id).update(
        {Folder.project_id: None}, synchronize_session=False
    )
    db.delete(project)
    db.commit()
    logger.info(f"Deleted project {project_id}")


def project_conversations(db: Session, project_id: int) -> List[Conversation]:
    get_project(db, project_id)
    return db.query(Conversation).filter(
        Conversation.project_id == project_id,
        Conversation.is_deleted == False,  # noqa: E712
    ).order_by(
        Conversation.is_pinned.desc(),
        Conversation.last_message_at.desc(),
        Conversation.created_at.desc(),
    ).all()


def project_analytics(db: Session, project_id: int) -> dict:
    get_project(db, project_id)
    count, messages, tokens = db.query(
        func.count(Conversation.id),
        func.coalesce(func.sum(Conversation.message_count), 0),
        func.coalesce(func.sum(Conversation.token_count), 0),
    ).filter(
        Conversation.project_id == project_id,
        Conversation.is_deleted == False,  # noqa: E712
    ).one()
    return {
        "conversation_count": count,
        "total_messages": messages,
        "total_tokens": tokens,
    }
