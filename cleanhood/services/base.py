"""
Transaction handling shared by every ledger-mutating service

A mutating service method runs inside one database transaction. Domain
exceptions and database errors roll the whole transaction back and are
turned into a failed ActionResult; notifications queued by the method are
only dispatched after a successful commit.
"""

from functools import wraps
from typing import Any, Callable, List, Optional, Tuple, Type
import logging

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from cleanhood.core.exceptions import (
    CleanhoodException,
    NotFoundException,
    ServiceUnavailableException,
    StatusConflictException,
)
from cleanhood.schemas.base import ActionResult
from cleanhood.services.notification import NotificationService

logger = logging.getLogger(__name__)

class TransactionalService:
    """Base class for services owning a request-scoped transaction"""

    def __init__(self, db: AsyncSession, notifier: Optional[NotificationService] = None):
        self.db = db
        self.notifier = notifier or NotificationService()
        self._outbox: List[Tuple[int, str, str]] = []

    def queue_notification(self, user_id: int, title: str, content: str) -> None:
        """Notify the user once the surrounding transaction has committed"""
        self._outbox.append((user_id, title, content))

    async def _dispatch_outbox(self) -> None:
        outbox, self._outbox = self._outbox, []
        for user_id, title, content in outbox:
            await self.notifier.notify(user_id, title, content)

    async def _get_for_update(self, model: Type[Any], entity_id: int, label: str) -> Any:
        """Load a row with a write lock, refreshing any stale copy in the session"""
        result = await self.db.execute(
            select(model)
            .where(model.id == entity_id)
            .with_for_update(of=model)
            .execution_options(populate_existing=True)
        )
        instance = result.scalars().first()
        if instance is None:
            raise NotFoundException(f"{label} not found")
        return instance

    async def _transition(self, instance: Any, state_machine, new_status) -> bool:
        """
        Move instance to new_status with a guarded UPDATE

        Returns False when new_status is already the current status.
        """
        current = instance.status
        if current == new_status:
            return False
        state_machine.validate_transition(current, new_status)

        model = type(instance)
        result = await self.db.execute(
            update(model)
            .where(model.id == instance.id, model.status == current)
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise StatusConflictException(state_machine.entity)

        set_committed_value(instance, "status", new_status)
        return True

def transactional(action: str):
    """Run a service method in one transaction and report an ActionResult"""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(self: TransactionalService, *args, **kwargs) -> ActionResult:
            try:
                result = await func(self, *args, **kwargs)
                await self.db.commit()
            except CleanhoodException as exc:
                await self.db.rollback()
                self._outbox.clear()
                if exc.status_code >= 500:
                    logger.error("%s aborted: %s (%s)", action, exc.detail, exc.error_code)
                else:
                    logger.warning("%s rejected: %s (%s)", action, exc.detail, exc.error_code)
                return ActionResult.fail(exc)
            except SQLAlchemyError:
                await self.db.rollback()
                self._outbox.clear()
                logger.exception("%s failed", action)
                return ActionResult.fail(ServiceUnavailableException())

            await self._dispatch_outbox()
            return result if result is not None else ActionResult.ok()

        return wrapper
    return decorator
