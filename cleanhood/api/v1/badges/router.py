"""
Badge API routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from cleanhood.core.database import get_db
from cleanhood.core.security import get_current_user, require_admin
from cleanhood.schemas.base import ActionResult
from cleanhood.services.badge_service import BadgeService, get_user_badges, list_badges
from cleanhood.utils.dependencies import ensure_success, ensure_self_or_admin
from .schemas import BadgeResponse, UserBadgeResponse, BadgeAssignment

router = APIRouter()

@router.get("/", response_model=List[BadgeResponse])
async def read_badge_catalog(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return [BadgeResponse.model_validate(badge) for badge in await list_badges(db)]

@router.get("/users/{user_id}", response_model=List[UserBadgeResponse])
async def read_user_badges(
    user_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Badges held by a user"""
    ensure_self_or_admin(user_id, current_user)
    return [UserBadgeResponse.model_validate(held) for held in await get_user_badges(db, user_id)]

@router.post("/grant", response_model=ActionResult)
async def grant_badge(
    request: BadgeAssignment,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return ensure_success(await BadgeService(db).grant_badge(request.user_id, request.badge_id))

@router.post("/revoke", response_model=ActionResult)
async def revoke_badge(
    request: BadgeAssignment,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return ensure_success(await BadgeService(db).revoke_badge(request.user_id, request.badge_id))
