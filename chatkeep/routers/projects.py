from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from chatkeep.database import get_db
from chatkeep.models.user import User
from chatkeep.schemas.conversation import ConversationOut
from chatkeep.schemas.project import ProjectCreate, ProjectUpdate, ProjectOut, ProjectAnalytics
from chatkeep.services import project_service
from chatkeep.services.user_service import get_current_user

router = APIRouter(prefix="/api/projects", tags=["Projects"])


@router.get("", response_model=List[ProjectOut])
def list_projects(
    include_archived: bool = Query(False),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return project_service.list_projects(db, user, include_archived=include_archived)


@router.post("", response_model=ProjectOut, status_code=status.HTTP_201_CREATED)
def create_project(body: ProjectCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """
    Create a project.

    Raises:
        409: If the user already has a project with this name
    """
    return project_service.create_project(db, user, body)


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(project_id: int, db: Session = Depends(get_db)):
    return project_service.get_project(db, project_id)


@router.put("/{project_id}", response_model=ProjectOut)
def update_project(project_id: int, body: ProjectUpdate, db: Session = Depends(get_db)):
    return project_service.update_project(db, project_id, body)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: int, db: Session = Depends(get_db)):
    project_service.delete_project(db, project_id)


@router.get("/{project_id}/conversations", response_model=List[ConversationOut])
def list_project_conversations(project_id: int, db: Session = Depends(get_db)):
    return project_service.project_conversations(db, project_id)


@router.get("/{project_id}/analytics", response_model=ProjectAnalytics)
def get_project_analytics(project_id: int, db: Session = Depends(get_db)):
    return project_service.project_analytics(db, project_id)
