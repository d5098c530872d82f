"""
Pickup API routes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from cleanhood.core.database import get_db
from cleanhood.core.security import get_current_user, require_admin
from cleanhood.schemas.base import ActionResult
from cleanhood.services.pickup_service import PickupService, get_user_pickups
from cleanhood.utils.dependencies import ensure_success, ensure_self_or_admin
from .schemas import PickupCreate, PickupStatusUpdate, PickupResponse

router = APIRouter()

@router.post(
    "",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule pickup"
)
async def schedule_pickup(
    request: PickupCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    user_id = request.user_id or current_user["id"]
    ensure_self_or_admin(user_id, current_user)
    result = await PickupService(db).schedule_pickup(
        user_id=user_id,
        pickup_date=request.pickup_date,
        items=[(item.item_name, item.quantity) for item in request.items],
        notes=request.notes,
    )
    return ensure_success(result)

@router.get("/users/{user_id}", response_model=List[PickupResponse])
async def read_user_pickups(
    user_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(user_id, current_user)
    return [PickupResponse.model_validate(pickup) for pickup in await get_user_pickups(db, user_id)]

@router.patch(
    "/{pickup_id}/status",
    response_model=ActionResult,
    summary="Update pickup status",
    description="Completing a pickup grants points for its recyclable and organic items"
)
async def update_pickup_status(
    pickup_id: int,
    request: PickupStatusUpdate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return ensure_success(await PickupService(db).update_pickup_status(pickup_id, request.status))
