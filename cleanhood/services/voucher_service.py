"""
Voucher service
Partner vouchers exchanged for points out of a finite stock
"""

from typing import List, Optional
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cleanhood.core.exceptions import NotFoundException, ValidationException, VoucherUnavailableException
from cleanhood.models import (
    Voucher,
    VoucherStatus,
    VoucherRedemption,
    VoucherRedemptionStatus,
    LogType,
    SourceType,
)
from cleanhood.schemas.base import ActionResult
from cleanhood.services.base import TransactionalService, transactional
from cleanhood.services.points_ledger import PointsLedger, validate_points
from cleanhood.services.state_machine import voucher_redemption_state_machine

logger = logging.getLogger(__name__)

VOUCHER_EDITABLE_FIELDS = frozenset({
    "partner_name",
    "partner_logo_url",
    "title",
    "description",
    "points_required",
    "quantity",
    "status",
})

def _validate_quantity(quantity) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
        raise ValidationException("Quantity must be zero or more.")

class VoucherService(TransactionalService):
    """Service for voucher catalog and redemptions"""

    @transactional("Create voucher")
    async def create_voucher(
        self,
        partner_name: str,
        title: str,
        description: str,
        points_required: int,
        quantity: int,
        partner_logo_url: Optional[str] = None,
        status: VoucherStatus = VoucherStatus.ACTIVE
    ) -> ActionResult:
        validate_points(points_required)
        _validate_quantity(quantity)

        voucher = Voucher(
            partner_name=partner_name,
            partner_logo_url=partner_logo_url,
            title=title,
            description=description,
            points_required=points_required,
            quantity=quantity,
            status=status,
        )
        self.db.add(voucher)
        await self.db.flush()

        logger.info("Voucher %s created for partner %s", voucher.id, partner_name)
        return ActionResult.ok("Voucher created.", voucher_id=voucher.id)

    @transactional("Update voucher")
    async def update_voucher(self, voucher_id: int, **changes) -> ActionResult:
        """
        Edit catalog fields, restock or toggle the status of a voucher

        Only the fields passed are changed. The row is locked like a
        redemption, so a restock never interleaves with a stock decrement.
        """
        unknown = set(changes) - VOUCHER_EDITABLE_FIELDS
        if unknown:
            raise ValidationException(f"Unknown voucher fields: {', '.join(sorted(unknown))}")
        if "points_required" in changes:
            validate_points(changes["points_required"])
        if "quantity" in changes:
            _validate_quantity(changes["quantity"])
        if "status" in changes:
            try:
                changes["status"] = VoucherStatus(changes["status"])
            except ValueError:
                raise ValidationException("Voucher status must be active or inactive.")

        voucher = await self._get_for_update(Voucher, voucher_id, "Voucher")
        for field, value in changes.items():
            setattr(voucher, field, value)
        await self.db.flush()

        logger.info("Voucher %s updated: %s", voucher_id, sorted(changes))
        return ActionResult.ok(
            "Voucher updated.",
            voucher_id=voucher_id,
            quantity=voucher.quantity,
            status=voucher.status.value,
        )

    @transactional("Delete voucher")
    async def delete_voucher(self, voucher_id: int) -> ActionResult:
        """Remove a voucher and its redemption history; points already spent stay spent"""
        await self._get_for_update(Voucher, voucher_id, "Voucher")
        await self.db.execute(delete(VoucherRedemption).where(VoucherRedemption.voucher_id == voucher_id))
        await self.db.execute(delete(Voucher).where(Voucher.id == voucher_id))

        logger.info("Voucher %s deleted", voucher_id)
        return ActionResult.ok("Voucher deleted.", voucher_id=voucher_id)

    @transactional("Redeem voucher")
    async def redeem_voucher(self, user_id: int, voucher_id: int) -> ActionResult:
        """
        Exchange points for one unit of voucher stock

        Stock is taken with a guarded decrement, so two requests racing for
        the last unit cannot both succeed. Any failure after that (for
        example insufficient points) rolls the decrement back.
        """
        voucher = await self._get_for_update(Voucher, voucher_id, "Voucher")
        if voucher.status != VoucherStatus.ACTIVE or voucher.quantity <= 0:
            raise VoucherUnavailableException()

        result = await self.db.execute(
            update(Voucher)
            .where(
                Voucher.id == voucher_id,
                Voucher.quantity > 0,
                Voucher.status == VoucherStatus.ACTIVE,
            )
            .values(quantity=Voucher.quantity - 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise VoucherUnavailableException()

        await PointsLedger(self.db).debit(
            user_id,
            voucher.points_required,
            reason=f"Voucher redemption: {voucher.title}",
            log_type=LogType.REDEEM_VOUCHER,
            source_type=SourceType.VOUCHER,
            source_id=voucher_id,
        )

        redemption = VoucherRedemption(
            user_id=user_id,
            voucher_id=voucher_id,
            status=VoucherRedemptionStatus.PENDING_REVIEW,
        )
        self.db.add(redemption)
        await self.db.flush()

        remaining = await self.db.scalar(select(Voucher.quantity).where(Voucher.id == voucher_id))
        logger.info("User %s redeemed voucher %s, %s left", user_id, voucher_id, remaining)
        return ActionResult.ok(
            "Voucher redeemed successfully.",
            redemption_id=redemption.id,
            voucher_id=voucher_id,
            points_spent=voucher.points_required,
            remaining_quantity=remaining,
        )

    @transactional("Process voucher redemption")
    async def process_voucher_redemption(self, redemption_id: int, coupon_code: str) -> ActionResult:
        """Attach the partner's coupon code; the ledger is not touched"""
        if not coupon_code or not coupon_code.strip():
            raise ValidationException("Coupon code is required.")

        redemption = await self._get_for_update(VoucherRedemption, redemption_id, "Voucher redemption")
        if not await self._transition(
            redemption, voucher_redemption_state_machine, VoucherRedemptionStatus.PROCESSED
        ):
            return ActionResult.ok(
                "Voucher redemption was already processed.",
                redemption_id=redemption_id,
                coupon_code=redemption.coupon_code,
            )

        redemption.coupon_code = coupon_code.strip()
        await self.db.flush()

        self.queue_notification(
            redemption.user_id,
            "Your voucher is ready!",
            f"Your coupon code for {redemption.voucher.title} is {redemption.coupon_code}.",
        )
        logger.info("Voucher redemption %s processed", redemption_id)
        return ActionResult.ok(
            "Voucher redemption processed.",
            redemption_id=redemption_id,
            coupon_code=redemption.coupon_code,
        )

    @transactional("Delete voucher redemption")
    async def delete_voucher_redemption(self, redemption_id: int) -> ActionResult:
        """Drop a redemption record; neither stock nor points are given back"""
        result = await self.db.execute(delete(VoucherRedemption).where(VoucherRedemption.id == redemption_id))
        if not result.rowcount:
            raise NotFoundException("Voucher redemption not found")

        logger.info("Voucher redemption %s deleted", redemption_id)
        return ActionResult.ok("Voucher redemption deleted.", redemption_id=redemption_id)

async def get_vouchers(db: AsyncSession, active_only: bool = False) -> List[Voucher]:
    query = select(Voucher).order_by(Voucher.points_required, Voucher.id)
    if active_only:
        query = query.where(Voucher.status == VoucherStatus.ACTIVE, Voucher.quantity > 0)
    result = await db.execute(query)
    return list(result.scalars().all())

async def get_voucher_redemptions(db: AsyncSession, user_id: Optional[int] = None) -> List[VoucherRedemption]:
    query = select(VoucherRedemption).order_by(VoucherRedemption.request_date.desc(), VoucherRedemption.id.desc())
    if user_id is not None:
        query = query.where(VoucherRedemption.user_id == user_id)
    result = await db.execute(query)
    return list(result.scalars().unique().all())
