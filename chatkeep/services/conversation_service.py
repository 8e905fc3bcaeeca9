"""
Conversation lifecycle: create, patch, archive, soft delete, duplicate, search.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from chatkeep.config import settings
from chatkeep.errors import NotFound
from chatkeep.models.conversation import Conversation
from chatkeep.models.message import Message
from chatkeep.models.user import User
from chatkeep.schemas.conversation import ConversationCreate, ConversationUpdate
from chatkeep.services.project_service import resolve_project_reference

logger = logging.getLogger(__name__)

# Flags the update endpoint accepts but that may never be nulled
_NON_NULLABLE = ("title", "is_archived", "is_pinned", "model")


def _recent_first(query):
    return query.order_by(
        Conversation.last_message_at.desc(),
        Conversation.created_at.desc(),
        Conversation.id.desc(),
    )


def get_conversation(db: Session, conversation_id: int) -> Conversation:
    """Fetch any stored conversation, archived and soft-deleted ones included."""
    conversation = db.query(Conversation).filter(Conversation.id == conversation_id).first()
    if not conversation:
        raise NotFound("Conversation not found")
    return conversation


def list_conversations(
    db: Session,
    user: User,
    archived: bool = False,
    project_id: Optional[int] = None,
) -> List[Conversation]:
    query = db.query(Conversation).filter(
        Conversation.user_id == user.id,
        Conversation.is_deleted == False,  # noqa: E712
        Conversation.is_archived == archived,
    )
    if project_id is not None:
        query = query.filter(Conversation.project_id == project_id)
    return _recent_first(query).all()


def create_conversation(db: Session, user: User, data: ConversationCreate) -> Conversation:
    now = datetime.utcnow()
    conversation = Conversation(
        user_id=user.id,
        title=data.title,
        project_id=resolve_project_reference(db, data.project_id),
        model=data.model or settings.DEFAULT_MODEL,
        last_message_at=now,
        created_at=now,
        updated_at=now,
    )
    db.add(conversation)
    db.commit()
    db.refresh(conversation)
    logger.info(f"Created conversation {conversation.id}")
    return conversation


def update_conversation(db: Session, conversation_id: int, updates: ConversationUpdate) -> Conversation:
    conversation = get_conversation(db, conversation_id)
    changes = updates.model_dump(exclude_unset=True)
    if "project_id" in changes:
        changes["project_id"] = resolve_project_reference(db, changes["project_id"])
    for key, value in changes.items():
        if value is None and key in _NON_NULLABLE:
            continue
        setattr(conversation, key, value)
    db.commit()
    db.refresh(conversation)
    return conversation


def set_archived(db: Session, conversation_id: int, archived: bool) -> Conversation:
    conversation = get_conversation(db, conversation_id)
    conversation.is_archived = archived
    db.commit()
    db.refresh(conversation)
    return conversation


def set_deleted(db: Session, conversation_id: int, deleted: bool) -> Conversation:
    """Flip the soft-delete flag. Messages and artifacts are left untouched."""
    conversation = get_conversation(db, conversation_id)
    conversation.is_deleted = deleted
    db.commit()
    db.refresh(conversation)
    logger.info(f"Conversation {conversation_id} is_deleted={deleted}")
    return conversation


def duplicate_conversation(db: Session, conversation_id: int) -> Conversation:
    original = get_conversation(db, conversation_id)
    now = datetime.utcnow()
    copy = Conversation(
        user_id=original.user_id,
        project_id=original.project_id,
        title=f"{original.title} (Copy)",
        model=original.model,
        last_message_at=now,
        created_at=now,
        updated_at=now,
    )
    db.add(copy)
    db.flush()

    messages = db.query(Message).filter(
        Message.conversation_id == original.id
    ).order_by(Message.created_at.asc(), Message.id.asc()).all()

    # Parent links are remapped onto the copied rows
    id_map = {}
    for message in messages:
        clone = Message(
            conversation_id=copy.id,
            role=message.role,
            content=message.content,
            images=message.images,
            tokens=message.tokens,
            parent_message_id=id_map.get(message.parent_message_id),
            created_at=message.created_at,
            edited_at=message.edited_at,
        )
        db.add(clone)
        db.flush()
        id_map[message.id] = clone.id

    copy.message_count = len(messages)
    copy.token_count = sum(m.tokens or 0 for m in messages)
    db.commit()
    db.refresh(copy)
    logger.info(f"Duplicated conversation {original.id} into {copy.id}")
    return copy


def search_conversations(db: Session, user: User, q: Optional[str]) -> List[Conversation]:
    query = db.query(Conversation).filter(
        Conversation.user_id == user.id,
        Conversation.is_deleted == False,  # noqa: E712
    )
    if q and q.strip():
        escaped = q.strip().lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        term = f"%{escaped}%"
        matching_ids = select(Message.conversation_id).where(func.lower(Message.content).like(term, escape="\\"))
        query = query.filter(or_(
            func.lower(Conversation.title).like(term, escape="\\"),
            Conversation.id.in_(matching_ids),
        ))
    return _recent_first(query).all()


def recount_messages(db: Session, conversation_id: Optional[int] = None) -> List[int]:
    """
    Read-repair the cached message and token counters.

    Returns:
        Ids of the conversations whose cached counters were wrong
    """
    stats = db.query(
        Message.conversation_id,
        func.count(Message.id),
        func.coalesce(func.sum(Message.tokens), 0),
    ).group_by(Message.conversation_id)
    actual = {cid: (count, tokens) for cid, count, tokens in stats.all()}

    query = db.query(Conversation)
    if conversation_id is not None:
        query = query.filter(Conversation.id == conversation_id)

    repaired = []
    for conversation in query.all():
        count, tokens = actual.get(conversation.id, (0, 0))
        if conversation.message_count != count or conversation.token_count != tokens:
            logger.warning(
                f"Conversation {conversation.id} counters drifted: "
                f"{conversation.message_count}/{conversation.token_count} -> {count}/{tokens}"
            )
            conversation.message_count = count
            conversation.token_count = tokens
            repaired.append(conversation.id)
    db.commit()
    return repaired
