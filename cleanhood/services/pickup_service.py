"""
Pickup service
Scheduling pickups and the automatic grant on completion
"""

from datetime import date
from typing import Iterable, List, Optional, Tuple
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cleanhood.core.exceptions import NotFoundException, ValidationException
from cleanhood.models import User, Pickup, PickupItem, PickupStatus, SourceType
from cleanhood.schemas.base import ActionResult
from cleanhood.services.base import TransactionalService, transactional
from cleanhood.services.item_catalog import resolve_category, pickup_points
from cleanhood.services.point_settings_service import get_point_settings
from cleanhood.services.points_ledger import PointsLedger
from cleanhood.services.state_machine import pickup_state_machine

logger = logging.getLogger(__name__)

class PickupService(TransactionalService):
    """Service for pickup scheduling and completion"""

    @transactional("Schedule pickup")
    async def schedule_pickup(
        self,
        user_id: int,
        pickup_date: date,
        items: Iterable[Tuple[str, int]],
        notes: Optional[str] = None
    ) -> ActionResult:
        items = list(items)
        if not items:
            raise ValidationException("A pickup needs at least one item.")
        for name, quantity in items:
            if not name or not name.strip():
                raise ValidationException("Item name is required.")
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                raise ValidationException("Item quantity must be a positive whole number.")

        if await self.db.get(User, user_id) is None:
            raise NotFoundException("User not found")

        pickup = Pickup(
            user_id=user_id,
            pickup_date=pickup_date,
            notes=notes,
            status=PickupStatus.SCHEDULED,
            items=[
                PickupItem(item_name=name.strip(), quantity=quantity, category=resolve_category(name))
                for name, quantity in items
            ],
        )
        self.db.add(pickup)
        await self.db.flush()

        logger.info("Pickup %s scheduled for user %s on %s", pickup.id, user_id, pickup_date)
        return ActionResult.ok("Pickup scheduled.", pickup_id=pickup.id)

    @transactional("Update pickup status")
    async def update_pickup_status(self, pickup_id: int, status: PickupStatus) -> ActionResult:
        """
        Change a pickup's status

        Completing a scheduled pickup grants points for its recyclable and
        organic items in the same transaction, at most once per pickup.
        """
        pickup = await self._get_for_update(Pickup, pickup_id, "Pickup")
        if not await self._transition(pickup, pickup_state_machine, status):
            return ActionResult.ok(
                f"Pickup is already {status.value}.",
                pickup_id=pickup_id,
                status=status.value,
                points_granted=0,
            )

        points_granted = 0
        if status == PickupStatus.COMPLETED:
            points_granted = await self._grant_for_completion(pickup)

        logger.info("Pickup %s moved to %s", pickup_id, status.value)
        return ActionResult.ok(
            "Pickup status updated.",
            pickup_id=pickup_id,
            status=status.value,
            points_granted=points_granted,
        )

    async def _grant_for_completion(self, pickup: Pickup) -> int:
        point_settings = await get_point_settings(self.db)
        if not point_settings.auto_grant_enabled:
            logger.info("Auto grant disabled; no points for pickup %s", pickup.id)
            return 0

        total = pickup_points(pickup.items, point_settings)
        if total <= 0:
            return 0

        ledger = PointsLedger(self.db)
        if await ledger.has_grant_for(SourceType.PICKUP, pickup.id):
            logger.warning("Pickup %s already has a grant; skipping", pickup.id)
            return 0

        await ledger.grant(
            pickup.user_id,
            total,
            reason=f"Automatic grant for completed pickup #{pickup.id}",
            source_type=SourceType.PICKUP,
            source_id=pickup.id,
        )
        return total

async def get_user_pickups(db: AsyncSession, user_id: int) -> List[Pickup]:
    """A user's pickups, newest pickup date first"""
    result = await db.execute(
        select(Pickup)
        .where(Pickup.user_id == user_id)
        .order_by(Pickup.pickup_date.desc(), Pickup.id.desc())
    )
    return list(result.scalars().all())
