"""SQLAlchemy ORM models for durable notification storage"""

from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class NotificationRecord(Base):
    """Notification row; pk preserves insertion order"""

    __tablename__ = "notification"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True, index=True)
    user_id = Column(Text, nullable=False, index=True)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(32), nullable=False, default="general")
    link = Column(Text, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False)
    archived_at = Column(DateTime(timezone=True), nullable=True)
