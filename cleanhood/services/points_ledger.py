"""
Points ledger primitives

Every balance movement goes through PointsLedger: the user row is locked,
the new balance is written with a guarded UPDATE and the movement is appended
to points_log in the same transaction. The primitives never commit; the
caller owns the transaction.
"""

from typing import Optional
import logging

from sqlalchemy import select, update, exists
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from cleanhood.core.exceptions import (
    NotFoundException,
    ValidationException,
    InsufficientPointsException,
    LedgerConflictException,
)
from cleanhood.models import User, PointsLog, LogType, SourceType

logger = logging.getLogger(__name__)

def validate_points(points) -> int:
    """Points must be a positive integer"""
    if isinstance(points, bool) or not isinstance(points, int) or points <= 0:
        raise ValidationException("Points must be a positive whole number.")
    return points

class PointsLedger:
    """Grant, deduct and debit primitives over users.points_balance"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _lock_user(self, user_id: int) -> User:
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundException("User not found")
        return user

    async def _apply(self, user: User, observed: int, new_balance: int, minimum: int = 0) -> None:
        """Write the balance only if nobody changed it since it was read"""
        stmt = (
            update(User)
            .where(User.id == user.id, User.points_balance == observed)
            .values(points_balance=new_balance)
            .execution_options(synchronize_session=False)
        )
        if minimum:
            stmt = stmt.where(User.points_balance >= minimum)

        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            logger.error("Guarded balance update missed for user %s (expected %s)", user.id, observed)
            raise LedgerConflictException(user.id)

        set_committed_value(user, "points_balance", new_balance)

    async def _append_entry(
        self,
        user_id: int,
        delta: int,
        requested_points: int,
        log_type: LogType,
        reason: Optional[str],
        source_type: SourceType,
        source_id: Optional[int],
    ) -> PointsLog:
        entry = PointsLog(
            user_id=user_id,
            delta=delta,
            requested_points=requested_points,
            log_type=log_type,
            reason=reason,
            source_type=source_type,
            source_id=source_id,
        )
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def grant(
        self,
        user_id: int,
        points: int,
        reason: Optional[str] = None,
        source_type: SourceType = SourceType.ADMIN,
        source_id: Optional[int] = None,
    ) -> PointsLog:
        """Add points to a user's balance"""
        validate_points(points)
        user = await self._lock_user(user_id)
        observed = user.points_balance

        await self._apply(user, observed, observed + points)
        entry = await self._append_entry(
            user_id, points, points, LogType.GRANT, reason, source_type, source_id
        )

        logger.info(
            "Granted %s points to user %s (%s #%s), balance %s",
            points, user_id, source_type.value, source_id, user.points_balance
        )
        return entry

    async def deduct(self, user_id: int, points: int, reason: Optional[str] = None) -> PointsLog:
        """
        Manual deduction, clamped at zero

        The log records what was actually removed in delta and what was asked
        for in requested_points, so the balance always equals the sum of deltas.
        """
        validate_points(points)
        user = await self._lock_user(user_id)
        observed = user.points_balance
        applied = min(points, observed)

        await self._apply(user, observed, observed - applied)
        entry = await self._append_entry(
            user_id, -applied, points, LogType.DEDUCT, reason, SourceType.ADMIN, None
        )

        if applied < points:
            logger.warning(
                "Deduction of %s points from user %s clamped to %s",
                points, user_id, applied
            )
        logger.info("Deducted %s points from user %s, balance %s", applied, user_id, user.points_balance)
        return entry

    async def debit(
        self,
        user_id: int,
        points: int,
        reason: Optional[str],
        log_type: LogType,
        source_type: SourceType,
        source_id: Optional[int] = None,
    ) -> PointsLog:
        """Strict debit for redemptions: fails instead of clamping"""
        validate_points(points)
        user = await self._lock_user(user_id)
        observed = user.points_balance
        if observed < points:
            raise InsufficientPointsException(required=points, available=observed)

        await self._apply(user, observed, observed - points, minimum=points)
        entry = await self._append_entry(
            user_id, -points, points, log_type, reason, source_type, source_id
        )

        logger.info(
            "Debited %s points from user %s for %s #%s, balance %s",
            points, user_id, source_type.value, source_id, user.points_balance
        )
        return entry

    async def has_grant_for(self, source_type: SourceType, source_id: int) -> bool:
        """Whether an automatic grant was already recorded for this source"""
        result = await self.db.execute(
            select(
                exists().where(
                    PointsLog.source_type == source_type,
                    PointsLog.source_id == source_id,
                    PointsLog.log_type == LogType.GRANT,
                )
            )
        )
        return bool(result.scalar())
