from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from chatkeep.database import get_db
from chatkeep.models.user import User
from chatkeep.schemas.conversation import (
    ConversationCreate, ConversationUpdate, ConversationOut, ArchiveRequest
)
from chatkeep.services import conversation_service
from chatkeep.services.user_service import get_current_user

router = APIRouter(prefix="/api", tags=["Conversations"])


@router.get("/conversations", response_model=List[ConversationOut])
def list_conversations(
    archived: bool = Query(False, description="List archived conversations instead of active ones"),
    project_id: Optional[int] = Query(None, description="Only conversations filed in this project"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """
    List the user's conversations, most recently active first.

    Soft-deleted conversations are never listed.
    """
    return conversation_service.list_conversations(db, user, archived=archived, project_id=project_id)


@router.post("/conversations", response_model=ConversationOut, status_code=status.HTTP_201_CREATED)
def create_conversation(
    convo: ConversationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return conversation_service.create_conversation(db, user, convo)


@router.get("/conversations/{conversation_id}", response_model=ConversationOut)
def get_conversation(conversation_id: int, db: Session = Depends(get_db)):
    return conversation_service.get_conversation(db, conversation_id)


@router.put("/conversations/{conversation_id}", response_model=ConversationOut)
def update_conversation(conversation_id: int, updates: ConversationUpdate, db: Session = Depends(get_db)):
    """
    Apply a partial patch.

    Raises:
        404: If the conversation does not exist
        422: If project_id is set and does not resolve to a project
    """
    return conversation_service.update_conversation(db, conversation_id, updates)


@router.put("/conversations/{conversation_id}/archive", response_model=ConversationOut)
def archive_conversation(
    conversation_id: int,
    body: Optional[ArchiveRequest] = None,
    db: Session = Depends(get_db),
):
    archived = body.is_archived if body is not None else True
    return conversation_service.set_archived(db, conversation_id, archived)


@router.delete("/conversations/{conversation_id}", response_model=ConversationOut)
def delete_conversation(conversation_id: int, db: Session = Depends(get_db)):
    """Soft delete: the row and its messages stay, it just leaves the listings."""
    return conversation_service.set_deleted(db, conversation_id, True)


@router.post("/conversations/{conversation_id}/restore", response_model=ConversationOut)
def restore_conversation(conversation_id: int, db: Session = Depends(get_db)):
    return conversation_service.set_deleted(db, conversation_id, False)


@router.post(
    "/conversations/{conversation_id}/duplicate",
    response_model=ConversationOut,
    status_code=status.HTTP_201_CREATED,
)
def duplicate_conversation(conversation_id: int, db: Session = Depends(get_db)):
    return conversation_service.duplicate_conversation(db, conversation_id)


@router.get("/search/conversations", response_model=List[ConversationOut])
def search_conversations(
    q: Optional[str] = Query(None, description="Matched against titles and message content"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return conversation_service.search_conversations(db, user, q)
