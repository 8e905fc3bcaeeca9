"""
Artifact creation, append-only versioning and extraction from assistant replies.
"""
import logging
import re
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chatkeep.errors import Conflict, NotFound, ValidationError
from chatkeep.models.artifact import Artifact
from chatkeep.models.message import Message
from chatkeep.schemas.artifact import ArtifactCreate, ArtifactEdit, ArtifactType
from chatkeep.services.conversation_service import get_conversation

logger = logging.getLogger(__name__)

CODE_BLOCK_RE = re.compile(r"```(\w+)?\n([\s\S]*?)```")

DOCUMENT_LANGUAGES = {"markdown", "md", "text", "txt"}

LANGUAGE_TITLES = {
    "html": "HTML",
    "svg": "SVG",
    "jsx": "React Component",
    "react": "React Component",
}


def new_identifier() -> str:
    return f"artifact_{uuid.uuid4().hex[:16]}"


def detect_artifacts(content: str) -> List[Dict[str, str]]:
    """
    Extract fenced code blocks from message text.

    Args:
        content: Message content, possibly containing ```lang fenced blocks

    Returns:
        One dict per block with type, language, title and content
    """
    artifacts = []
    for index, match in enumerate(CODE_BLOCK_RE.finditer(content or ""), start=1):
        language = (match.group(1) or "text").lower()
        body = match.group(2)

        if language == "mermaid":
            kind, title = ArtifactType.MERMAID, f"Diagram {index}"
        elif language in DOCUMENT_LANGUAGES:
            kind, title = ArtifactType.DOCUMENT, f"Document {index}"
        else:
            kind = ArtifactType.CODE
            title = f"{LANGUAGE_TITLES.get(language, 'Code')} {index}"

        artifacts.append({
            "type": kind.value,
            "language": language,
            "title": title,
            "content": body,
        })
    return artifacts


def add_detected_artifacts(db: Session, message: Message) -> List[Artifact]:
    """Stage version-1 artifacts for every code block of ``message``. Caller commits."""
    created = []
    now = datetime.utcnow()
    for found in detect_artifacts(message.content):
        artifact = Artifact(
            conversation_id=message.conversation_id,
            message_id=message.id,
            identifier=new_identifier(),
            version=1,
            created_at=now,
            updated_at=now,
            **found,
        )
        db.add(artifact)
        created.append(artifact)
    if created:
        logger.info(f"Detected {len(created)} artifacts in message {message.id}")
    return created


def get_artifact(db: Session, artifact_id: int) -> Artifact:
    artifact = db.query(Artifact).filter(Artifact.id == artifact_id).first()
    if not artifact:
        raise NotFound("Artifact not found")
    return artifact


def list_conversation_artifacts(db: Session, conversation_id: int) -> List[Artifact]:
    get_conversation(db, conversation_id)
    return db.query(Artifact).filter(
        Artifact.conversation_id == conversation_id
    ).order_by(Artifact.created_at.desc(), Artifact.id.desc()).all()


def list_message_artifacts(db: Session, message_id: int) -> List[Artifact]:
    if not db.query(Message.id).filter(Message.id == message_id).first():
        raise NotFound("Message not found")
    return db.query(Artifact).filter(
        Artifact.message_id == message_id
    ).order_by(Artifact.created_at.asc(), Artifact.id.asc()).all()


def create_artifact(db: Session, conversation_id: int, data: ArtifactCreate) -> Artifact:
    get_conversation(db, conversation_id)
    message = db.query(Message).filter(Message.id == data.message_id).first()
    if not message:
        raise NotFound("Message not found")
    if message.conversation_id != conversation_id:
        raise ValidationError(f"Message {message.id} does not belong to conversation {conversation_id}")

    identifier = data.identifier or new_identifier()
    if db.query(Artifact.id).filter(Artifact.identifier == identifier).first():
        raise Conflict(f"Artifact identifier '{identifier}' already exists")

    now = datetime.utcnow()
    artifact = Artifact(
        conversation_id=conversation_id,
        message_id=message.id,
        type=data.type.value,
        title=data.title,
        identifier=identifier,
        language=data.language,
        content=data.content,
        version=1,
        created_at=now,
        updated_at=now,
    )
    db.add(artifact)
    db.commit()
    db.refresh(artifact)
    logger.info(f"Created artifact {artifact.id} ({identifier} v1)")
    return artifact


def create_version(db: Session, artifact_id: int, edit: ArtifactEdit) -> Artifact:
    """Append version N+1 for the artifact's identifier; earlier rows stay untouched."""
    base = get_artifact(db, artifact_id)
    latest: Optional[int] = db.query(func.max(Artifact.version)).filter(
        Artifact.identifier == base.identifier
    ).scalar()

    now = datetime.utcnow()
    artifact = Artifact(
        conversation_id=base.conversation_id,
        message_id=base.message_id,
        type=base.type,
        title=edit.title or base.title,
        identifier=base.identifier,
        language=base.language,
        content=edit.content,
        version=(latest or 0) + 1,
        created_at=now,
        updated_at=now,
    )
    db.add(artifact)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(f"Artifact '{base.identifier}' was modified concurrently, retry the edit")
    db.refresh(artifact)
    logger.info(f"Artifact {base.identifier} now at v{artifact.version}")
    return artifact


def list_versions(db: Session, artifact_id: int) -> List[Artifact]:
    artifact = get_artifact(db, artifact_id)
    return db.query(Artifact).filter(
        Artifact.identifier == artifact.identifier
    ).order_by(Artifact.version.asc()).all()
