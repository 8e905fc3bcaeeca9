"""
Database services for message operations.
"""
import logging
import re
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from chatkeep.errors import Conflict, NotFound
from chatkeep.models.artifact import Artifact
from chatkeep.models.conversation import Conversation, DEFAULT_TITLE
from chatkeep.models.message import Message
from chatkeep.schemas.message import MessageCreate
from chatkeep.services.artifact_service import add_detected_artifacts
from chatkeep.services.conversation_service import get_conversation
from chatkeep.utils.token import estimate_tokens

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 50

_LEADING_FILLER = re.compile(
    r"^(can you|could you|please|help me|i need|i want to|how do i|how to|"
    r"what is|what are|tell me|explain|show me)\s+",
    re.IGNORECASE,
)


def generate_title(text: str) -> str:
    """Derive a short conversation title from the first user message."""
    title = _LEADING_FILLER.sub("", text.strip()).strip()
    title = title[:1].upper() + title[1:]
    if len(title) > MAX_TITLE_LENGTH:
        title = title[:MAX_TITLE_LENGTH - 3] + "..."
    if len(title) < 3:
        title = "New Chat"
    return title


def get_message(db: Session, message_id: int) -> Message:
    message = db.query(Message).filter(Message.id == message_id).first()
    if not message:
        raise NotFound("Message not found")
    return message


def list_messages(db: Session, conversation_id: int) -> List[Message]:
    """Oldest first. Archived and soft-deleted conversations still answer."""
    get_conversation(db, conversation_id)
    return db.query(Message).filter(
        Message.conversation_id == conversation_id
    ).order_by(Message.created_at.asc(), Message.id.asc()).all()


def _latest_message_id(db: Session, conversation_id: int) -> Optional[int]:
    row = db.query(Message.id).filter(
        Message.conversation_id == conversation_id
    ).order_by(Message.created_at.desc(), Message.id.desc()).first()
    return row[0] if row else None


def store_message(db: Session, conversation_id: int, data: MessageCreate) -> Message:
    """
    Append a message and update the conversation's cached counters.

    The message row, the counter bump and any detected artifacts are committed
    together.

    Args:
        db: Database session
        conversation_id: ID of the conversation
        data: Validated message payload

    Returns:
        Created message object
    """
    conversation = get_conversation(db, conversation_id)
    tokens = data.tokens if data.tokens is not None else estimate_tokens(data.content, conversation.model)
    now = datetime.utcnow()

    message = Message(
        conversation_id=conversation.id,
        role=data.role,
        content=data.content,
        images=[image.model_dump(exclude_none=True) for image in data.images] if data.images else None,
        tokens=tokens,
        parent_message_id=_latest_message_id(db, conversation.id),
        created_at=now,
    )
    db.add(message)
    db.flush()

    if data.role == "user" and conversation.title == DEFAULT_TITLE and conversation.message_count == 0:
        conversation.title = generate_title(data.content)

    conversation.message_count = (conversation.message_count or 0) + 1
    conversation.token_count = (conversation.token_count or 0) + tokens
    conversation.last_message_at = now
    conversation.updated_at = now

    if data.role == "assistant":
        add_detected_artifacts(db, message)

    db.commit()
    db.refresh(message)
    logger.info(f"Appended {message.role} message {message.id} to conversation {conversation.id}")
    return message


def _has_later_messages(db: Session, message: Message) -> bool:
    return db.query(Message.id).filter(
        Message.conversation_id == message.conversation_id,
        Message.id > message.id,
    ).first() is not None


def edit_message(db: Session, message_id: int, content: str, create_branch: bool = False) -> Tuple[Message, bool]:
    """
    Change a message's content.

    A branch edit in the middle of a thread keeps the original and adds a
    sibling carrying the new content.

    Returns:
        The edited (or newly branched) message and whether a branch was created
    """
    message = get_message(db, message_id)

    if create_branch and _has_later_messages(db, message):
        conversation = db.query(Conversation).filter(Conversation.id == message.conversation_id).one()
        tokens = estimate_tokens(content, conversation.model)
        now = datetime.utcnow()
        sibling = Message(
            conversation_id=message.conversation_id,
            role=message.role,
            content=content,
            tokens=tokens,
            parent_message_id=message.parent_message_id,
            created_at=now,
        )
        db.add(sibling)
        conversation.message_count = (conversation.message_count or 0) + 1
        conversation.token_count = (conversation.token_count or 0) + tokens
        conversation.last_message_at = now
        db.commit()
        db.refresh(sibling)
        logger.info(f"Branched message {message.id} into {sibling.id}")
        return sibling, True

    message.content = content
    message.edited_at = datetime.utcnow()
    db.commit()
    db.refresh(message)
    return message, False


def delete_message(db: Session, message_id: int) -> None:
    """Remove a message that produced no artifacts; its replies move up to its parent."""
    message = get_message(db, message_id)
    if db.query(Artifact.id).filter(Artifact.message_id == message.id).first():
        raise Conflict("Message has artifacts and cannot be deleted")

    db.query(Message).filter(Message.parent_message_id == message.id).update(
        {Message.parent_message_id: message.parent_message_id}, synchronize_session=False
    )
    conversation = db.query(Conversation).filter(Conversation.id == message.conversation_id).one()
    conversation.message_count = max((conversation.message_count or 0) - 1, 0)
    conversation.token_count = max((conversation.token_count or 0) - (message.tokens or 0), 0)
    db.delete(message)
    db.commit()
    logger.info(f"Deleted message {message_id} from conversation {conversation.id}")


def find_branches(db: Session, conversation_id: int) -> Dict:
    """Group messages by parent and report the parents with more than one child."""
    messages = list_messages(db, conversation_id)
    by_parent = defaultdict(list)
    for message in messages:
        by_parent[message.parent_message_id].append(message)

    branches = []
    for parent_id, children in by_parent.items():
        if len(children) > 1:
            branches.append({
                "parent_id": parent_id,
                "branches": [{
                    "message_id": child.id,
                    "role": child.role,
                    "preview": child.content[:100],
                    "created_at": child.created_at,
                } for child in children],
            })

    return {
        "branches": branches,
        "messages_by_parent": {
            ("root" if parent_id is None else str(parent_id)): [m.id for m in children]
            for parent_id, children in by_parent.items()
        },
    }
