"""
The implicit single user every request acts as.
"""
import logging
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from chatkeep.config import settings
from chatkeep.database import get_db
from chatkeep.models.user import User
from chatkeep.schemas.user import ProfileUpdate, SettingsUpdate

logger = logging.getLogger(__name__)


def ensure_default_user(db: Session) -> User:
    """Return the deployment's user, creating it on first use."""
    user = db.query(User).order_by(User.id.asc()).first()
    if user is None:
        user = User(
            email=settings.DEFAULT_USER_EMAIL,
            name=settings.DEFAULT_USER_NAME,
            preferences={},
            custom_instructions="",
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Created default user {user.id}")
    return user


def get_current_user(db: Session = Depends(get_db)) -> User:
    return ensure_default_user(db)


def update_profile(db: Session, user: User, updates: ProfileUpdate) -> User:
    for key, value in updates.model_dump(exclude_unset=True).items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


def update_settings(db: Session, user: User, updates: SettingsUpdate) -> User:
    if updates.preferences is not None:
        user.preferences = updates.preferences
    if updates.custom_instructions is not None:
        user.custom_instructions = updates.custom_instructions
    db.commit()
    db.refresh(user)
    return user


def set_custom_instructions(db: Session, user: User, text: Optional[str]) -> User:
    user.custom_instructions = text or ""
    db.commit()
    db.refresh(user)
    return user
