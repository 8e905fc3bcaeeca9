from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from chatkeep.database import get_db
from chatkeep.schemas.artifact import ArtifactOut
from chatkeep.schemas.message import MessageCreate, MessageEdit, MessageOut, MessageEditResult, BranchesOut
from chatkeep.services import artifact_service, message_service

router = APIRouter(prefix="/api", tags=["Messages"])


@router.get("/conversations/{conversation_id}/messages", response_model=List[MessageOut])
def get_conversation_messages(conversation_id: int, db: Session = Depends(get_db)):
    """
    Get all messages for a specific conversation.

    This endpoint retrieves messages in chronological order (oldest to newest),
    whether or not the conversation is archived or deleted.
    """
    return message_service.list_messages(db, conversation_id)


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED,
    summary="Append a message",
)
def append_message(conversation_id: int, body: MessageCreate, db: Session = Depends(get_db)):
    """
    Append a message to a conversation.

    This endpoint:
    - Stores the message with a server-assigned timestamp
    - Increments the conversation's message count and last-activity time
    - Extracts fenced code blocks of assistant messages into artifacts

    Request body parameters:
    - role: "user", "assistant" or "system" (default "user")
    - content: Non-empty message text
    - images: Optional ordered list of image descriptors
    - tokens: Optional token count, estimated when omitted
    """
    return message_service.store_message(db, conversation_id, body)


@router.put("/messages/{message_id}", response_model=MessageEditResult)
def edit_message(message_id: int, body: MessageEdit, db: Session = Depends(get_db)):
    message, branched = message_service.edit_message(db, message_id, body.content, body.create_branch)
    return MessageEditResult(message=message, branched=branched, original_message_id=message_id)


@router.delete("/messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a message")
def delete_message(message_id: int, db: Session = Depends(get_db)):
    """
    Delete a specific message by ID.

    Raises:
        404 Not Found: If the message doesn't exist
        409 Conflict: If artifacts were created from the message
    """
    message_service.delete_message(db, message_id)


@router.get("/conversations/{conversation_id}/branches", response_model=BranchesOut)
def get_branches(conversation_id: int, db: Session = Depends(get_db)):
    return message_service.find_branches(db, conversation_id)


@router.get("/messages/{message_id}/artifacts", response_model=List[ArtifactOut])
def get_message_artifacts(message_id: int, db: Session = Depends(get_db)):
    return artifact_service.list_message_artifacts(db, message_id)
