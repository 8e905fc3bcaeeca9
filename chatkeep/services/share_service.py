"""
Read-only published snapshots of a conversation.
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from chatkeep.errors import Gone, NotFound
from chatkeep.models.artifact import Artifact
from chatkeep.models.message import Message
from chatkeep.models.share import SharedConversation
from chatkeep.services.conversation_service import get_conversation

logger = logging.getLogger(__name__)


def share_url(share: SharedConversation) -> str:
    return f"/share/{share.share_token}"


def serialize_share(share: SharedConversation) -> Dict:
    return {
        "id": share.id,
        "conversation_id": share.conversation_id,
        "share_token": share.share_token,
        "share_url": share_url(share),
        "is_public": share.is_public,
        "view_count": share.view_count,
        "created_at": share.created_at,
        "expires_at": share.expires_at,
    }


def create_share(db: Session, conversation_id: int, expires_in_days: Optional[int] = None) -> SharedConversation:
    get_conversation(db, conversation_id)
    now = datetime.utcnow()
    share = SharedConversation(
        conversation_id=conversation_id,
        share_token=secrets.token_hex(16),
        is_public=True,
        created_at=now,
        expires_at=now + timedelta(days=expires_in_days) if expires_in_days else None,
    )
    db.add(share)
    db.commit()
    db.refresh(share)
    logger.info(f"Shared conversation {conversation_id} as {share.share_token}")
    return share


def list_shares(db: Session, conversation_id: int) -> List[SharedConversation]:
    get_conversation(db, conversation_id)
    return db.query(SharedConversation).filter(
        SharedConversation.conversation_id == conversation_id
    ).order_by(SharedConversation.created_at.desc(), SharedConversation.id.desc()).all()


def _get_share(db: Session, token: str) -> SharedConversation:
    share = db.query(SharedConversation).filter(SharedConversation.share_token == token).first()
    if not share:
        raise NotFound("Shared conversation not found")
    return share


def open_share(db: Session, token: str) -> Dict:
    """
    Resolve a share token into its snapshot and count the view.

    Raises:
        NotFound: unknown token
        Gone: the link has expired
    """
    share = _get_share(db, token)
    if share.expires_at and share.expires_at < datetime.utcnow():
        raise Gone("Share link has expired")

    share.view_count = (share.view_count or 0) + 1
    db.commit()

    conversation = get_conversation(db, share.conversation_id)
    messages = db.query(Message).filter(
        Message.conversation_id == conversation.id
    ).order_by(Message.created_at.asc(), Message.id.asc()).all()
    artifacts = db.query(Artifact).filter(
        Artifact.conversation_id == conversation.id
    ).order_by(Artifact.created_at.asc(), Artifact.id.asc()).all()

    return {
        "conversation": conversation,
        "messages": messages,
        "artifacts": artifacts,
        "view_count": share.view_count,
        "is_public": share.is_public,
    }


def revoke_share(db: Session, token: str) -> None:
    share = _get_share(db, token)
    db.delete(share)
    db.commit()
    logger.info(f"Revoked share {token}")
