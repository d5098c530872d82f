"""
Voucher API routes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from cleanhood.core.database import get_db
from cleanhood.core.security import get_current_user, require_admin
from cleanhood.schemas.base import ActionResult
from cleanhood.services.voucher_service import VoucherService, get_vouchers, get_voucher_redemptions
from cleanhood.services.notification import NotificationService
from cleanhood.utils.dependencies import ensure_success, get_notifier
from .schemas import VoucherCreate, VoucherUpdate, VoucherResponse, CouponCodeRequest, VoucherRedemptionResponse

router = APIRouter()

@router.get("", response_model=List[VoucherResponse])
async def list_vouchers(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Residents only see vouchers that can still be redeemed"""
    active_only = current_user.get("role") != "admin"
    return [VoucherResponse.model_validate(voucher) for voucher in await get_vouchers(db, active_only)]

@router.post("", response_model=ActionResult, status_code=status.HTTP_201_CREATED)
async def create_voucher(
    request: VoucherCreate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return ensure_success(await VoucherService(db).create_voucher(**request.model_dump()))

@router.get("/redemptions", response_model=List[VoucherRedemptionResponse])
async def list_voucher_redemptions(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    user_id = None if current_user.get("role") == "admin" else current_user["id"]
    redemptions = await get_voucher_redemptions(db, user_id)
    return [VoucherRedemptionResponse.model_validate(item) for item in redemptions]

@router.post(
    "/{voucher_id}/redeem",
    response_model=ActionResult,
    summary="Redeem voucher",
    description="Exchange points for one unit of the voucher's stock"
)
async def redeem_voucher(
    voucher_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return ensure_success(await VoucherService(db).redeem_voucher(current_user["id"], voucher_id))

@router.post("/redemptions/{redemption_id}/process", response_model=ActionResult)
async def process_voucher_redemption(
    redemption_id: int,
    request: CouponCodeRequest,
    current_user: dict = Depends(require_admin),
    notifier: NotificationService = Depends(get_notifier),
    db: AsyncSession = Depends(get_db)
):
    """Attach the partner coupon code to a redemption"""
    result = await VoucherService(db, notifier).process_voucher_redemption(redemption_id, request.coupon_code)
    return ensure_success(result)

@router.delete("/redemptions/{redemption_id}", response_model=ActionResult)
async def delete_voucher_redemption(
    redemption_id: int,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return ensure_success(await VoucherService(db).delete_voucher_redemption(redemption_id))

@router.patch(
    "/{voucher_id}",
    response_model=ActionResult,
    summary="Update voucher",
    description="Edit catalog fields, restock, or switch a voucher between active and inactive"
)
async def update_voucher(
    voucher_id: int,
    request: VoucherUpdate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    changes = {
        field: value
        for field, value in request.model_dump(exclude_unset=True).items()
        if value is not None or field == "partner_logo_url"
    }
    return ensure_success(await VoucherService(db).update_voucher(voucher_id, **changes))

@router.delete("/{voucher_id}", response_model=ActionResult)
async def delete_voucher(
    voucher_id: int,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return ensure_success(await VoucherService(db).delete_voucher(voucher_id))
