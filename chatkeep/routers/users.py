from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from chatkeep.database import get_db
from chatkeep.models.user import User
from chatkeep.schemas.user import (
    UserOut, ProfileUpdate, SettingsOut, SettingsUpdate, CustomInstructions
)
from chatkeep.services import user_service
from chatkeep.services.user_service import get_current_user

router = APIRouter(prefix="/api", tags=["User"])


def _settings(user: User) -> SettingsOut:
    return SettingsOut(
        preferences=user.preferences or {},
        custom_instructions=user.custom_instructions or "",
    )


@router.get("/auth/me", response_model=UserOut)
def read_me(user: User = Depends(get_current_user)):
    return user


@router.put("/auth/profile", response_model=UserOut)
def update_profile(updates: ProfileUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return user_service.update_profile(db, user, updates)


@router.get("/settings", response_model=SettingsOut)
def read_settings(user: User = Depends(get_current_user)):
    return _settings(user)


@router.put("/settings", response_model=SettingsOut)
def update_settings(updates: SettingsUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _settings(user_service.update_settings(db, user, updates))


@router.get("/settings/custom-instructions", response_model=CustomInstructions)
def read_custom_instructions(user: User = Depends(get_current_user)):
    return CustomInstructions(custom_instructions=user.custom_instructions or "")


@router.put("/settings/custom-instructions", response_model=CustomInstructions)
def update_custom_instructions(
    body: CustomInstructions,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    user = user_service.set_custom_instructions(db, user, body.custom_instructions)
    return CustomInstructions(custom_instructions=user.custom_instructions)
