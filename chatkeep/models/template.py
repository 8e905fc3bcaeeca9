from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Boolean, JSON
from datetime import datetime
from chatkeep.database import Base


class ConversationTemplate(Base):
    __tablename__ = "conversation_templates"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    template_structure = Column(JSON, nullable=False)  # {title, model, messages: [{role, content}]}
    category = Column(String(100), nullable=True)
    is_public = Column(Boolean, default=False, nullable=False)
    usage_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class ProjectTemplate(Base):
    __tablename__ = "project_templates"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    template_structure = Column(JSON, nullable=False)  # {name, description, color, custom_instructions}
    category = Column(String(100), nullable=True)
    is_public = Column(Boolean, default=False, nullable=False)
    usage_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
