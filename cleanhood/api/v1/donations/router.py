"""
Donation API routes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from cleanhood.core.database import get_db
from cleanhood.core.security import get_current_user, require_admin
from cleanhood.schemas.base import ActionResult
from cleanhood.services.donation_service import DonationService, get_donations
from cleanhood.services.notification import NotificationService
from cleanhood.utils.dependencies import ensure_success, get_notifier
from .schemas import DonationCreate, DonationStatusUpdate, DonationResponse

router = APIRouter()

@router.post("", response_model=ActionResult, status_code=status.HTTP_201_CREATED)
async def submit_donation(
    request: DonationCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Submit a clothing donation request"""
    result = await DonationService(db).submit_donation(user_id=current_user["id"], **request.model_dump())
    return ensure_success(result)

@router.get("", response_model=List[DonationResponse])
async def list_donations(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Admins see every donation, residents their own"""
    user_id = None if current_user.get("role") == "admin" else current_user["id"]
    return [DonationResponse.model_validate(donation) for donation in await get_donations(db, user_id)]

@router.patch(
    "/{donation_id}/status",
    response_model=ActionResult,
    description="Approving a donation grants points per piece"
)
async def update_donation_status(
    donation_id: int,
    request: DonationStatusUpdate,
    current_user: dict = Depends(require_admin),
    notifier: NotificationService = Depends(get_notifier),
    db: AsyncSession = Depends(get_db)
):
    return ensure_success(await DonationService(db, notifier).update_donation_status(donation_id, request.status))

@router.delete("/{donation_id}", response_model=ActionResult)
async def delete_donation(
    donation_id: int,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return ensure_success(await DonationService(db).delete_donation(donation_id))
