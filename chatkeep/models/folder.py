from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from datetime import datetime
from chatkeep.database import Base


class Folder(Base):
    __tablename__ = "conversation_folders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    parent_folder_id = Column(Integer, ForeignKey("conversation_folders.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(100), nullable=False)
    position = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class FolderItem(Base):
    __tablename__ = "conversation_folder_items"
    __table_args__ = (UniqueConstraint("folder_id", "conversation_id", name="uq_folder_items_pair"),)

    id = Column(Integer, primary_key=True, index=True)
    folder_id = Column(Integer, ForeignKey("conversation_folders.id", ondelete="CASCADE"), nullable=False)
    conversation_id = Column(Integer, ForeignKey("conversations.id"), nullable=False)
