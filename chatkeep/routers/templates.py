from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from chatkeep.database import get_db
from chatkeep.models.user import User
from chatkeep.schemas.conversation import ConversationOut
from chatkeep.schemas.project import ProjectOut
from chatkeep.schemas.template import (
    ConversationTemplateCreate, ProjectTemplateCreate, ProjectTemplateUse, TemplateOut
)
from chatkeep.services import template_service
from chatkeep.services.user_service import get_current_user

router = APIRouter(prefix="/api", tags=["Templates"])


@router.get("/templates", response_model=List[TemplateOut])
def list_templates(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return template_service.list_conversation_templates(db, user)


@router.post("/templates", response_model=TemplateOut, status_code=status.HTTP_201_CREATED)
def create_template(
    body: ConversationTemplateCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Snapshot a conversation's title, model and messages into a template."""
    return template_service.create_conversation_template(db, user, body)


@router.post("/templates/{template_id}/use", response_model=ConversationOut, status_code=status.HTTP_201_CREATED)
def use_template(template_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return template_service.use_conversation_template(db, user, template_id)


@router.delete("/templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(template_id: int, db: Session = Depends(get_db)):
    template_service.delete_conversation_template(db, template_id)


@router.get("/project-templates", response_model=List[TemplateOut])
def list_project_templates(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return template_service.list_project_templates(db, user)


@router.post("/project-templates", response_model=TemplateOut, status_code=status.HTTP_201_CREATED)
def create_project_template(
    body: ProjectTemplateCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return template_service.create_project_template(db, user, body)


@router.post(
    "/project-templates/{template_id}/use",
    response_model=ProjectOut,
    status_code=status.HTTP_201_CREATED,
)
def use_project_template(
    template_id: int,
    body: Optional[ProjectTemplateUse] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """
    Create a project from a template.

    Raises:
        404: Unknown template
        409: A project with the resulting name already exists
    """
    return template_service.use_project_template(db, user, template_id, body.name if body else None)


@router.delete("/project-templates/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project_template(template_id: int, db: Session = Depends(get_db)):
    template_service.delete_project_template(db, template_id)
