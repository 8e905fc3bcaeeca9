from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from chatkeep.database import get_db
from chatkeep.models.user import User
from chatkeep.prompt_examples import EXAMPLE_CONVERSATIONS
from chatkeep.schemas.prompt import PromptCreate, PromptUpdate, PromptOut, ExampleConversation
from chatkeep.services import prompt_service
from chatkeep.services.user_service import get_current_user

router = APIRouter(prefix="/api/prompts", tags=["Prompts"])


@router.get("/library", response_model=List[PromptOut])
def list_library(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    """The user's own prompts plus every public one, newest first."""
    return prompt_service.list_prompts(db, user)


@router.post("/library", response_model=PromptOut, status_code=status.HTTP_201_CREATED)
def create_prompt(body: PromptCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return prompt_service.create_prompt(db, user, body)


# Static paths are declared before /{prompt_id}
@router.get("/examples", response_model=List[ExampleConversation])
def list_examples():
    return EXAMPLE_CONVERSATIONS


@router.get("/categories", response_model=List[str])
def list_categories(db: Session = Depends(get_db)):
    return prompt_service.list_categories(db)


@router.get("/{prompt_id}", response_model=PromptOut)
def get_prompt(prompt_id: int, db: Session = Depends(get_db)):
    return prompt_service.get_prompt(db, prompt_id)


@router.put("/{prompt_id}", response_model=PromptOut)
def update_prompt(prompt_id: int, body: PromptUpdate, db: Session = Depends(get_db)):
    return prompt_service.update_prompt(db, prompt_id, body)


@router.delete("/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_prompt(prompt_id: int, db: Session = Depends(get_db)):
    prompt_service.delete_prompt(db, prompt_id)


@router.post("/{prompt_id}/use", response_model=PromptOut)
def use_prompt(prompt_id: int, db: Session = Depends(get_db)):
    return prompt_service.use_prompt(db, prompt_id)
