"""Artifact model. Each edit inserts a new row; rows are never updated."""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, UniqueConstraint
from datetime import datetime
from chatkeep.database import Base


class Artifact(Base):
    __tablename__ = "artifacts"
    __table_args__ = (UniqueConstraint("identifier", "version", name="uq_artifacts_identifier_version"),)

    id = Column(Integer, primary_key=True, index=True)
    conversation_id = Column(Integer, ForeignKey("conversations.id"), nullable=False, index=True)
    message_id = Column(Integer, ForeignKey("messages.id"), nullable=False, index=True)
    type = Column(String(50), nullable=False)  # "code", "mermaid", "document", "other"
    title = Column(String(200), nullable=True)
    identifier = Column(String(100), nullable=False, index=True)
    language = Column(String(50), nullable=True)
    content = Column(Text, nullable=False)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Artifact(identifier={self.identifier}, version={self.version}, type={self.type})>"
