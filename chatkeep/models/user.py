from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from datetime import datetime
from chatkeep.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=True)
    name = Column(String(100), nullable=True)
    avatar_url = Column(Text, nullable=True)
    preferences = Column(JSON, nullable=True)
    custom_instructions = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)
