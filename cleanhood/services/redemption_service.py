"""
Redemption service
Cash-out requests: points are snapshotted at request time and debited
only when an admin completes the transfer
"""

from decimal import Decimal
from typing import List, Optional
import logging

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from cleanhood.core.config import settings
from cleanhood.core.exceptions import (
    NotFoundException,
    ValidationException,
    InsufficientPointsException,
)
from cleanhood.models import User, RedemptionRequest, RedemptionStatus, LogType, SourceType
from cleanhood.schemas.base import ActionResult
from cleanhood.services.base import TransactionalService, transactional
from cleanhood.services.points_ledger import PointsLedger, validate_points
from cleanhood.services.state_machine import redemption_state_machine

logger = logging.getLogger(__name__)

def redemption_amount(points: int) -> Decimal:
    """Cash value of a number of points"""
    return (Decimal(points) * settings.REDEMPTION_AMOUNT_PER_POINT).quantize(Decimal("0.01"))

class RedemptionService(TransactionalService):
    """Service for bank cash-out requests"""

    async def _reserved_points(self, user_id: int) -> int:
        """Points already promised to the user's pending requests"""
        reserved = await self.db.scalar(
            select(func.coalesce(func.sum(RedemptionRequest.points_redeemed), 0))
            .where(
                RedemptionRequest.user_id == user_id,
                RedemptionRequest.status == RedemptionStatus.PENDING,
            )
        )
        return int(reserved or 0)

    @transactional("Create redemption request")
    async def create_redemption_request(
        self,
        user_id: int,
        bank_name: str,
        account_holder: str,
        account_number: str,
        points: Optional[int] = None
    ) -> ActionResult:
        """
        Open a cash-out request

        The amount is computed here from the balance held in the database.
        Without an explicit points value the whole available balance is
        requested; available means balance minus the user's other pending
        requests.
        """
        for label, value in (
            ("Bank name", bank_name),
            ("Account holder", account_holder),
            ("Account number", account_number),
        ):
            if not value or not value.strip():
                raise ValidationException(f"{label} is required.")
        if points is not None:
            validate_points(points)

        user = await self._get_for_update(User, user_id, "User")
        available = user.points_balance - await self._reserved_points(user_id)
        if points is None:
            points = available
        if points <= 0 or points > available:
            raise InsufficientPointsException(required=max(points, 1), available=max(available, 0))

        request = RedemptionRequest(
            user_id=user_id,
            points_redeemed=points,
            amount=redemption_amount(points),
            bank_name=bank_name.strip(),
            account_holder=account_holder.strip(),
            account_number=account_number.strip(),
            status=RedemptionStatus.PENDING,
        )
        self.db.add(request)
        await self.db.flush()

        logger.info("Redemption request %s opened by user %s for %s points", request.id, user_id, points)
        return ActionResult.ok(
            "Redemption request submitted.",
            redemption_id=request.id,
            points_redeemed=points,
            amount=str(request.amount),
        )

    @transactional("Update redemption status")
    async def update_redemption_status(self, redemption_id: int, status: RedemptionStatus) -> ActionResult:
        request = await self._get_for_update(RedemptionRequest, redemption_id, "Redemption request")
        if not await self._transition(request, redemption_state_machine, status):
            return ActionResult.ok(
                f"Redemption request is already {status.value}.",
                redemption_id=redemption_id,
                status=status.value,
            )

        if status == RedemptionStatus.COMPLETED:
            await PointsLedger(self.db).debit(
                request.user_id,
                request.points_redeemed,
                reason=f"Cash redemption #{request.id}",
                log_type=LogType.REDEEM_CASH,
                source_type=SourceType.REDEMPTION,
                source_id=request.id,
            )
            self.queue_notification(
                request.user_id,
                "Amount transferred!",
                f"We transferred {request.amount} YER to your account in exchange for your points. "
                "Thank you for being part of our community!",
            )

        logger.info("Redemption request %s moved to %s", redemption_id, status.value)
        return ActionResult.ok(
            "Redemption status updated.",
            redemption_id=redemption_id,
            status=status.value,
        )

    @transactional("Delete redemption request")
    async def delete_redemption_request(self, redemption_id: int) -> ActionResult:
        result = await self.db.execute(
            delete(RedemptionRequest).where(RedemptionRequest.id == redemption_id)
        )
        if not result.rowcount:
            raise NotFoundException("Redemption request not found")

        logger.info("Redemption request %s deleted", redemption_id)
        return ActionResult.ok("Redemption request deleted.", redemption_id=redemption_id)

async def get_redemption_requests(
    db: AsyncSession,
    user_id: Optional[int] = None,
    status: Optional[RedemptionStatus] = None
) -> List[RedemptionRequest]:
    query = select(RedemptionRequest).order_by(RedemptionRequest.request_date.desc(), RedemptionRequest.id.desc())
    if user_id is not None:
        query = query.where(RedemptionRequest.user_id == user_id)
    if status is not None:
        query = query.where(RedemptionRequest.status == status)
    result = await db.execute(query)
    return list(result.scalars().all())
