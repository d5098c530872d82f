"""
Donation service
Clothing donations and the automatic grant on approval
"""

from typing import List, Optional
import logging

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from cleanhood.core.exceptions import NotFoundException, ValidationException
from cleanhood.models import User, Donation, DonationStatus, SourceType
from cleanhood.schemas.base import ActionResult
from cleanhood.services.base import TransactionalService, transactional
from cleanhood.services.point_settings_service import get_point_settings
from cleanhood.services.points_ledger import PointsLedger
from cleanhood.services.state_machine import donation_state_machine

logger = logging.getLogger(__name__)

class DonationService(TransactionalService):
    """Service for donation requests"""

    @transactional("Submit donation")
    async def submit_donation(
        self,
        user_id: int,
        clothing_type: str,
        condition: str,
        quantity: int,
        pickup_address: str,
        notes: Optional[str] = None
    ) -> ActionResult:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationException("Quantity must be at least 1.")
        if not pickup_address or len(pickup_address.strip()) < 10:
            raise ValidationException("Pickup address must be at least 10 characters.")

        if await self.db.get(User, user_id) is None:
            raise NotFoundException("User not found")

        donation = Donation(
            user_id=user_id,
            clothing_type=clothing_type,
            condition=condition,
            quantity=quantity,
            pickup_address=pickup_address.strip(),
            notes=notes,
        )
        self.db.add(donation)
        await self.db.flush()

        logger.info("Donation %s submitted by user %s", donation.id, user_id)
        return ActionResult.ok("Donation request submitted successfully.", donation_id=donation.id)

    @transactional("Update donation status")
    async def update_donation_status(self, donation_id: int, status: DonationStatus) -> ActionResult:
        donation = await self._get_for_update(Donation, donation_id, "Donation")
        if not await self._transition(donation, donation_state_machine, status):
            return ActionResult.ok(
                f"Donation is already {status.value}.",
                donation_id=donation_id,
                status=status.value,
                points_granted=0,
            )

        points_granted = 0
        if status == DonationStatus.APPROVED:
            points_granted = await self._grant_for_approval(donation)
            self.queue_notification(
                donation.user_id,
                "Donation accepted!",
                f"Your donation #{donation.id} of {donation.quantity} piece(s) was accepted. Thank you!",
            )

        logger.info("Donation %s moved to %s", donation_id, status.value)
        return ActionResult.ok(
            "Donation status updated.",
            donation_id=donation_id,
            status=status.value,
            points_granted=points_granted,
        )

    async def _grant_for_approval(self, donation: Donation) -> int:
        point_settings = await get_point_settings(self.db)
        if not point_settings.auto_grant_enabled or point_settings.donation_per_piece <= 0:
            return 0

        ledger = PointsLedger(self.db)
        if await ledger.has_grant_for(SourceType.DONATION, donation.id):
            logger.info("Donation %s was granted before; not granting again", donation.id)
            return 0

        points = donation.quantity * point_settings.donation_per_piece
        await ledger.grant(
            donation.user_id,
            points,
            reason=f"Points for donation #{donation.id}",
            source_type=SourceType.DONATION,
            source_id=donation.id,
        )
        return points

    @transactional("Delete donation")
    async def delete_donation(self, donation_id: int) -> ActionResult:
        result = await self.db.execute(delete(Donation).where(Donation.id == donation_id))
        if not result.rowcount:
            raise NotFoundException("Donation not found")

        logger.info("Donation %s deleted", donation_id)
        return ActionResult.ok("Donation deleted.", donation_id=donation_id)

async def get_donations(db: AsyncSession, user_id: Optional[int] = None) -> List[Donation]:
    query = select(Donation).order_by(Donation.request_date.desc(), Donation.id.desc())
    if user_id is not None:
        query = query.where(Donation.user_id == user_id)
    result = await db.execute(query)
    return list(result.scalars().all())
