"""
Prompt library entries owned by the user or published to everyone.
"""
import logging
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from chatkeep.errors import NotFound
from chatkeep.models.prompt import PromptEntry
from chatkeep.models.user import User
from chatkeep.schemas.prompt import PromptCreate, PromptUpdate

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"


def list_prompts(db: Session, user: User) -> List[PromptEntry]:
    return db.query(PromptEntry).filter(
        or_(PromptEntry.user_id == user.id, PromptEntry.is_public == True)  # noqa: E712
    ).order_by(PromptEntry.created_at.desc(), PromptEntry.id.desc()).all()


def get_prompt(db: Session, prompt_id: int) -> PromptEntry:
    prompt = db.query(PromptEntry).filter(PromptEntry.id == prompt_id).first()
    if not prompt:
        raise NotFound("Prompt not found")
    return prompt


def create_prompt(db: Session, user: User, data: PromptCreate) -> PromptEntry:
    prompt = PromptEntry(
        user_id=user.id,
        title=data.title,
        description=data.description,
        prompt_template=data.prompt_template,
        category=data.category or DEFAULT_CATEGORY,
        tags=data.tags,
        is_public=data.is_public,
    )
    db.add(prompt)
    db.commit()
    db.refresh(prompt)
    return prompt


def update_prompt(db: Session, prompt_id: int, updates: PromptUpdate) -> PromptEntry:
    prompt = get_prompt(db, prompt_id)
    for key, value in updates.model_dump(exclude_unset=True).items():
        if value is None and key in ("title", "prompt_template", "is_public"):
            continue
        setattr(prompt, key, value)
    if not prompt.category:
        prompt.category = DEFAULT_CATEGORY
    db.commit()
    db.refresh(prompt)
    return prompt


def delete_prompt(db: Session, prompt_id: int) -> None:
    prompt = get_prompt(db, prompt_id)
    db.delete(prompt)
    db.commit()


def use_prompt(db: Session, prompt_id: int) -> PromptEntry:
    prompt = get_prompt(db, prompt_id)
    prompt.usage_count = (prompt.usage_count or 0) + 1
    db.commit()
    db.refresh(prompt)
    return prompt


def list_categories(db: Session) -> List[str]:
    rows = db.query(PromptEntry.category).filter(
        PromptEntry.category.isnot(None)
    ).distinct().order_by(PromptEntry.category.asc()).all()
    return [row[0] for row in rows]
