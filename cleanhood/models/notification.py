"""
Notification model for user communications
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey, Index, DateTime
from sqlalchemy.sql import func
import enum

from .base import Base, enum_type

class NotificationAudience(str, enum.Enum):
    ALL = "all"
    USERS = "users"
    ADMINS = "admins"
    SPECIFIC_USER = "specific_user"

class Notification(Base):
    """In-app notification"""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    target_audience = Column(enum_type(NotificationAudience), nullable=False)
    target_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Indexes
    __table_args__ = (
        Index("idx_notifications_target_user", "target_user_id"),
    )
