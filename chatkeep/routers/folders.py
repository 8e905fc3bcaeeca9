from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List, Optional

from chatkeep.database import get_db
from chatkeep.models.user import User
from chatkeep.schemas.folder import FolderCreate, FolderUpdate, FolderOut, FolderItemCreate, FolderItemOut
from chatkeep.services import folder_service
from chatkeep.services.user_service import get_current_user

router = APIRouter(prefix="/api/folders", tags=["Folders"])


@router.get("", response_model=List[FolderOut])
def list_folders(
    project_id: Optional[int] = Query(None, description="Folders of this project plus unscoped ones"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return folder_service.list_folders(db, user, project_id)


@router.post("", response_model=FolderOut, status_code=status.HTTP_201_CREATED)
def create_folder(body: FolderCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return folder_service.create_folder(db, user, body)


@router.put("/{folder_id}", response_model=FolderOut)
def update_folder(folder_id: int, body: FolderUpdate, db: Session = Depends(get_db)):
    return folder_service.update_folder(db, folder_id, body)


@router.delete("/{folder_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_folder(folder_id: int, db: Session = Depends(get_db)):
    folder_service.delete_folder(db, folder_id)


@router.get("/{folder_id}/items", response_model=List[FolderItemOut])
def list_folder_items(folder_id: int, db: Session = Depends(get_db)):
    return folder_service.list_items(db, folder_id)


@router.post("/{folder_id}/items", response_model=FolderItemOut, status_code=status.HTTP_201_CREATED)
def add_folder_item(folder_id: int, body: FolderItemCreate, response: Response, db: Session = Depends(get_db)):
    """Add a conversation to a folder. Re-adding returns the existing item with 200."""
    item, created = folder_service.add_item(db, folder_id, body.conversation_id)
    if not created:
        response.status_code = status.HTTP_200_OK
    return item


@router.delete("/{folder_id}/items/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_folder_item(folder_id: int, conversation_id: int, db: Session = Depends(get_db)):
    folder_service.remove_item(db, folder_id, conversation_id)
