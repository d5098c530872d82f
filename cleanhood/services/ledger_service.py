"""
Ledger service
Manual admin adjustments plus read access to balances and history
"""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from cleanhood.core.exceptions import NotFoundException
from cleanhood.models import User, UserRole, PointsLog, UserBadge
from cleanhood.schemas.base import ActionResult
from cleanhood.services.base import TransactionalService, transactional
from cleanhood.services.points_ledger import PointsLedger

logger = logging.getLogger(__name__)

class LedgerService(TransactionalService):
    """Service for manual point grants and deductions"""

    @transactional("Grant points")
    async def grant_points(self, user_id: int, points: int, reason: Optional[str] = None) -> ActionResult:
        entry = await PointsLedger(self.db).grant(user_id, points, reason)
        balance = await self.db.scalar(select(User.points_balance).where(User.id == user_id))
        return ActionResult.ok(
            "Points granted.",
            user_id=user_id,
            delta=entry.delta,
            balance=balance,
            log_id=entry.id,
        )

    @transactional("Deduct points")
    async def deduct_points(self, user_id: int, points: int, reason: Optional[str] = None) -> ActionResult:
        entry = await PointsLedger(self.db).deduct(user_id, points, reason)
        balance = await self.db.scalar(select(User.points_balance).where(User.id == user_id))
        return ActionResult.ok(
            "Points deducted.",
            user_id=user_id,
            delta=entry.delta,
            requested_points=entry.requested_points,
            balance=balance,
            log_id=entry.id,
        )

async def get_balance(db: AsyncSession, user_id: int) -> int:
    """Current balance of a user"""
    balance = await db.scalar(select(User.points_balance).where(User.id == user_id))
    if balance is None:
        raise NotFoundException("User not found")
    return balance

async def get_points_log(
    db: AsyncSession,
    user_id: int,
    limit: int = 50,
    offset: int = 0
) -> List[PointsLog]:
    """Most recent ledger entries first"""
    await get_balance(db, user_id)
    result = await db.execute(
        select(PointsLog)
        .where(PointsLog.user_id == user_id)
        .order_by(PointsLog.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all())

async def get_leaderboard(db: AsyncSession, limit: int = 10) -> List[User]:
    """Residents ordered by balance, with their badges loaded"""
    result = await db.execute(
        select(User)
        .where(User.role == UserRole.USER)
        .options(selectinload(User.badges).joinedload(UserBadge.badge))
        .order_by(User.points_balance.desc(), User.id)
        .limit(limit)
    )
    return list(result.scalars().unique().all())

async def find_balance_drift(db: AsyncSession) -> List[Dict[str, Any]]:
    """
    Users whose balance differs from the sum of their ledger deltas

    Read-only; an empty list means the ledger is consistent.
    """
    totals = (
        select(PointsLog.user_id, func.coalesce(func.sum(PointsLog.delta), 0).label("total"))
        .group_by(PointsLog.user_id)
        .subquery()
    )
    log_total = func.coalesce(totals.c.total, 0)
    result = await db.execute(
        select(User.id, User.points_balance, log_total)
        .outerjoin(totals, totals.c.user_id == User.id)
        .where(User.points_balance != log_total)
        .order_by(User.id)
    )

    drift = [
        {"user_id": user_id, "balance": balance, "log_total": int(total)}
        for user_id, balance, total in result.all()
    ]
    if drift:
        logger.error("Ledger drift detected for %s user(s)", len(drift))
    return drift
