"""Artifacts API endpoints"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from chatkeep.database import get_db
from chatkeep.schemas.artifact import ArtifactCreate, ArtifactEdit, ArtifactOut
from chatkeep.services import artifact_service

router = APIRouter(prefix="/api", tags=["Artifacts"])


@router.get("/conversations/{conversation_id}/artifacts", response_model=List[ArtifactOut])
def list_artifacts(conversation_id: int, db: Session = Depends(get_db)):
    """List every artifact version of a conversation, newest first"""
    return artifact_service.list_conversation_artifacts(db, conversation_id)


@router.post(
    "/conversations/{conversation_id}/artifacts",
    response_model=ArtifactOut,
    status_code=status.HTTP_201_CREATED,
)
def create_artifact(conversation_id: int, body: ArtifactCreate, db: Session = Depends(get_db)):
    """Create version 1 of a new artifact"""
    return artifact_service.create_artifact(db, conversation_id, body)


@router.get("/artifacts/{artifact_id}", response_model=ArtifactOut)
def get_artifact(artifact_id: int, db: Session = Depends(get_db)):
    return artifact_service.get_artifact(db, artifact_id)


@router.put("/artifacts/{artifact_id}", response_model=ArtifactOut)
def update_artifact(artifact_id: int, body: ArtifactEdit, db: Session = Depends(get_db)):
    """Store new content as the next version; earlier versions are kept"""
    return artifact_service.create_version(db, artifact_id, body)


@router.get("/artifacts/{artifact_id}/versions", response_model=List[ArtifactOut])
def list_artifact_versions(artifact_id: int, db: Session = Depends(get_db)):
    return artifact_service.list_versions(db, artifact_id)
