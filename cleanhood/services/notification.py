"""
Notification service for in-app notifications
Dispatch is best effort: a failed write is logged, never raised
"""

from typing import Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from cleanhood.core.database import AsyncSessionLocal, get_db_context
from cleanhood.models import Notification, NotificationAudience

logger = logging.getLogger(__name__)

class NotificationService:
    """Service for managing notifications"""

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self.session_factory = session_factory or AsyncSessionLocal

    async def create_notification(
        self,
        title: str,
        content: str,
        audience: NotificationAudience,
        target_user_id: Optional[int] = None
    ) -> bool:
        """Store a notification in its own transaction"""
        try:
            async with get_db_context(self.session_factory) as session:
                session.add(Notification(
                    title=title,
                    content=content,
                    target_audience=audience,
                    target_user_id=target_user_id if audience == NotificationAudience.SPECIFIC_USER else None,
                ))
        except SQLAlchemyError:
            logger.exception("Could not store notification %r for user %s", title, target_user_id)
            return False

        logger.info("Notification %r sent to %s", title, target_user_id or audience.value)
        return True

    async def notify(self, user_id: int, title: str, content: str) -> bool:
        """Fire-and-forget notification to one user"""
        return await self.create_notification(
            title=title,
            content=content,
            audience=NotificationAudience.SPECIFIC_USER,
            target_user_id=user_id,
        )
