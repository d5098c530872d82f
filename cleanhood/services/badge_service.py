"""Badge register: grant, revoke and list achievement badges"""

from typing import List
import logging

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cleanhood.core.exceptions import NotFoundException, BadgeAlreadyGrantedException
from cleanhood.models import User, Badge, UserBadge
from cleanhood.schemas.base import ActionResult
from cleanhood.services.base import TransactionalService, transactional

logger = logging.getLogger(__name__)

class BadgeService(TransactionalService):
    """Badges carry no point value; they never touch the ledger"""

    async def _ensure_exists(self, user_id: int, badge_id: int) -> None:
        if await self.db.get(User, user_id) is None:
            raise NotFoundException("User not found")
        if await self.db.get(Badge, badge_id) is None:
            raise NotFoundException("Badge not found")

    @transactional("Grant badge")
    async def grant_badge(self, user_id: int, badge_id: int) -> ActionResult:
        await self._ensure_exists(user_id, badge_id)

        held = await self.db.scalar(
            select(UserBadge.id).where(UserBadge.user_id == user_id, UserBadge.badge_id == badge_id)
        )
        if held is not None:
            raise BadgeAlreadyGrantedException()

        self.db.add(UserBadge(user_id=user_id, badge_id=badge_id))
        try:
            await self.db.flush()
        except IntegrityError:
            # Lost a race with a concurrent grant of the same badge
            raise BadgeAlreadyGrantedException()

        logger.info("Badge %s granted to user %s", badge_id, user_id)
        return ActionResult.ok("Badge granted.", user_id=user_id, badge_id=badge_id)

    @transactional("Revoke badge")
    async def revoke_badge(self, user_id: int, badge_id: int) -> ActionResult:
        result = await self.db.execute(
            delete(UserBadge).where(UserBadge.user_id == user_id, UserBadge.badge_id == badge_id)
        )
        if result.rowcount:
            logger.info("Badge %s revoked from user %s", badge_id, user_id)
        return ActionResult.ok("Badge revoked.", user_id=user_id, badge_id=badge_id)

async def get_user_badges(db: AsyncSession, user_id: int) -> List[UserBadge]:
    """Badges held by a user, oldest first"""
    if await db.get(User, user_id) is None:
        raise NotFoundException("User not found")
    result = await db.execute(
        select(UserBadge)
        .where(UserBadge.user_id == user_id)
        .order_by(UserBadge.earned_at, UserBadge.id)
    )
    return list(result.scalars().unique().all())

async def list_badges(db: AsyncSession) -> List[Badge]:
    result = await db.execute(select(Badge).order_by(Badge.id))
    return list(result.scalars().all())
