"""
Folders group conversations through a many-to-many join table.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from chatkeep.errors import NotFound, ValidationError
from chatkeep.models.folder import Folder, FolderItem
from chatkeep.models.user import User
from chatkeep.schemas.folder import FolderCreate, FolderUpdate
from chatkeep.services.conversation_service import get_conversation
from chatkeep.services.project_service import resolve_project_reference

logger = logging.getLogger(__name__)


def get_folder(db: Session, folder_id: int) -> Folder:
    folder = db.query(Folder).filter(Folder.id == folder_id).first()
    if not folder:
        raise NotFound("Folder not found")
    return folder


def _resolve_parent(db: Session, parent_folder_id: Optional[int], folder_id: Optional[int] = None) -> Optional[int]:
    if parent_folder_id is None:
        return None
    if parent_folder_id == folder_id:
        raise ValidationError("A folder cannot be its own parent")
    if not db.query(Folder.id).filter(Folder.id == parent_folder_id).first():
        raise ValidationError(f"Folder {parent_folder_id} does not exist")

    # Walk up from the new parent; meeting the folder itself would close a cycle
    ancestor_id, seen = parent_folder_id, set()
    while ancestor_id is not None and ancestor_id not in seen:
        if ancestor_id == folder_id:
            raise ValidationError("A folder cannot be moved inside its own subfolder")
        seen.add(ancestor_id)
        row = db.query(Folder.parent_folder_id).filter(Folder.id == ancestor_id).first()
        ancestor_id = row[0] if row else None
    return parent_folder_id


def list_folders(db: Session, user: User, project_id: Optional[int] = None) -> List[Folder]:
    query = db.query(Folder).filter(Folder.user_id == user.id)
    if project_id is not None:
        query = query.filter(or_(Folder.project_id == project_id, Folder.project_id.is_(None)))
    return query.order_by(Folder.position.asc(), Folder.created_at.asc(), Folder.id.asc()).all()


def create_folder(db: Session, user: User, data: FolderCreate) -> Folder:
    folder = Folder(
        user_id=user.id,
        name=data.name,
        project_id=resolve_project_reference(db, data.project_id),
        parent_folder_id=_resolve_parent(db, data.parent_folder_id),
    )
    db.add(folder)
    db.commit()
    db.refresh(folder)
    logger.info(f"Created folder {folder.id} '{folder.name}'")
    return folder


def update_folder(db: Session, folder_id: int, updates: FolderUpdate) -> Folder:
    folder = get_folder(db, folder_id)
    changes = updates.model_dump(exclude_unset=True)
    if "parent_folder_id" in changes:
        changes["parent_folder_id"] = _resolve_parent(db, changes["parent_folder_id"], folder.id)
    for key, value in changes.items():
        if value is None and key in ("name", "position"):
            continue
        setattr(folder, key, value)
    db.commit()
    db.refresh(folder)
    return folder


def delete_folder(db: Session, folder_id: int) -> None:
    folder = get_folder(db, folder_id)
    db.query(FolderItem).filter(FolderItem.folder_id == folder.id).delete(synchronize_session=False)
    db.query(Folder).filter(Folder.parent_folder_id == folder.id).update(
        {Folder.parent_folder_id: folder.parent_folder_id}, synchronize_session=False
    )
    db.delete(folder)
    db.commit()
    logger.info(f"Deleted folder {folder_id}")


def list_items(db: Session, folder_id: int) -> List[FolderItem]:
    get_folder(db, folder_id)
    return db.query(FolderItem).filter(FolderItem.folder_id == folder_id).order_by(FolderItem.id.asc()).all()


def add_item(db: Session, folder_id: int, conversation_id: int) -> Tuple[FolderItem, bool]:
    """
    File a conversation into a folder.

    Returns:
        The folder item and whether it was newly created
    """
    get_folder(db, folder_id)
    get_conversation(db, conversation_id)

    existing = db.query(FolderItem).filter(
        FolderItem.folder_id == folder_id,
        FolderItem.conversation_id == conversation_id,
    ).first()
    if existing:
        return existing, False

    item = FolderItem(folder_id=folder_id, conversation_id=conversation_id)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item, True


def remove_item(db: Session, folder_id: int, conversation_id: int) -> None:
    get_folder(db, folder_id)
    deleted = db.query(FolderItem).filter(
        FolderItem.folder_id == folder_id,
        FolderItem.conversation_id == conversation_id,
    ).delete(synchronize_session=False)
    if not deleted:
        raise NotFound("Conversation is not in this folder")
    db.commit()
