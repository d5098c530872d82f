"""
Redemption API routes
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from cleanhood.core.database import get_db
from cleanhood.core.security import get_current_user, require_admin
from cleanhood.models.redemption import RedemptionStatus
from cleanhood.schemas.base import ActionResult
from cleanhood.services.redemption_service import RedemptionService, get_redemption_requests
from cleanhood.services.notification import NotificationService
from cleanhood.utils.dependencies import ensure_success, get_notifier
from .schemas import RedemptionCreate, RedemptionStatusUpdate, RedemptionResponse

router = APIRouter()

@router.post(
    "",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Request cash-out"
)
async def create_redemption_request(
    request: RedemptionCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await RedemptionService(db).create_redemption_request(
        user_id=current_user["id"],
        bank_name=request.bank_name,
        account_holder=request.account_holder,
        account_number=request.account_number,
        points=request.points,
    )
    return ensure_success(result)

@router.get("", response_model=List[RedemptionResponse])
async def list_redemption_requests(
    status: Optional[RedemptionStatus] = Query(None),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    user_id = None if current_user.get("role") == "admin" else current_user["id"]
    requests = await get_redemption_requests(db, user_id=user_id, status=status)
    return [RedemptionResponse.model_validate(item) for item in requests]

@router.patch(
    "/{redemption_id}/status",
    response_model=ActionResult,
    description="Completing a request debits the user's points"
)
async def update_redemption_status(
    redemption_id: int,
    request: RedemptionStatusUpdate,
    current_user: dict = Depends(require_admin),
    notifier: NotificationService = Depends(get_notifier),
    db: AsyncSession = Depends(get_db)
):
    return ensure_success(await RedemptionService(db, notifier).update_redemption_status(redemption_id, request.status))

@router.delete("/{redemption_id}", response_model=ActionResult)
async def delete_redemption_request(
    redemption_id: int,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return ensure_success(await RedemptionService(db).delete_redemption_request(redemption_id))
