"""
Points ledger API routes
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from cleanhood.core.database import get_db
from cleanhood.core.security import get_current_user, require_admin
from cleanhood.schemas.base import ActionResult
from cleanhood.services.ledger_service import LedgerService, get_balance, get_points_log, get_leaderboard
from cleanhood.services.point_settings_service import PointSettingsService, get_point_settings
from cleanhood.utils.dependencies import get_pagination_params, ensure_success, ensure_self_or_admin
from cleanhood.utils.pagination import PaginationParams
from .schemas import (
    PointsAdjustRequest,
    BalanceResponse,
    PointsLogEntry,
    PointsLogResponse,
    PointSettingsResponse,
    PointSettingsUpdate,
    LeaderboardEntry,
)

router = APIRouter()

@router.post(
    "/grant",
    response_model=ActionResult,
    summary="Grant points",
    description="Manually add points to a user's balance"
)
async def grant_points(
    request: PointsAdjustRequest,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = LedgerService(db)
    return ensure_success(await service.grant_points(request.user_id, request.points, request.reason))

@router.post(
    "/deduct",
    response_model=ActionResult,
    summary="Deduct points",
    description="Manually remove points; the deduction is clamped at the current balance"
)
async def deduct_points(
    request: PointsAdjustRequest,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = LedgerService(db)
    return ensure_success(await service.deduct_points(request.user_id, request.points, request.reason))

@router.get("/settings", response_model=PointSettingsResponse)
async def read_point_settings(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Current automatic grant configuration"""
    return PointSettingsResponse.model_validate(await get_point_settings(db))

@router.put("/settings", response_model=ActionResult)
async def update_point_settings(
    request: PointSettingsUpdate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = PointSettingsService(db)
    return ensure_success(await service.update_point_settings(**request.model_dump()))

@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def contributions_leaderboard(
    limit: int = Query(10, ge=1, le=100),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Top contributors by points balance"""
    users = await get_leaderboard(db, limit=limit)
    return [
        LeaderboardEntry(
            rank=rank,
            user_id=user.id,
            full_name=user.full_name,
            points_balance=user.points_balance,
            badges=[held.badge.name for held in user.badges],
        )
        for rank, user in enumerate(users, start=1)
    ]

@router.get("/{user_id}/balance", response_model=BalanceResponse)
async def read_balance(
    user_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    ensure_self_or_admin(user_id, current_user)
    return BalanceResponse(user_id=user_id, points_balance=await get_balance(db, user_id))

@router.get("/{user_id}/log", response_model=PointsLogResponse)
async def read_points_log(
    user_id: int,
    pagination: PaginationParams = Depends(get_pagination_params),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Ledger history, newest first"""
    ensure_self_or_admin(user_id, current_user)
    entries = await get_points_log(db, user_id, limit=pagination.size, offset=pagination.offset)
    return PointsLogResponse(
        user_id=user_id,
        items=[PointsLogEntry.model_validate(entry) for entry in entries],
        page=pagination.page,
        size=pagination.size,
    )
