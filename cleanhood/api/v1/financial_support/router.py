"""
Financial support API routes
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from cleanhood.core.database import get_db
from cleanhood.core.security import get_current_user, require_admin
from cleanhood.schemas.base import ActionResult
from cleanhood.services.financial_support_service import FinancialSupportService, get_support_submissions
from cleanhood.services.notification import NotificationService
from cleanhood.utils.dependencies import ensure_success, get_notifier
from .schemas import SupportCreate, SupportStatusUpdate, SupportResponse

router = APIRouter()

@router.post("", response_model=ActionResult, status_code=status.HTTP_201_CREATED)
async def submit_support(
    request: SupportCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await FinancialSupportService(db).submit_support(
        user_id=current_user["id"],
        amount=request.amount,
        bank_name=request.bank_name,
        receipt_url=request.receipt_url,
    )
    return ensure_success(result)

@router.get("", response_model=List[SupportResponse])
async def list_support_submissions(
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return [SupportResponse.model_validate(item) for item in await get_support_submissions(db)]

@router.patch("/{support_id}/status", response_model=ActionResult)
async def update_support_status(
    support_id: int,
    request: SupportStatusUpdate,
    current_user: dict = Depends(require_admin),
    notifier: NotificationService = Depends(get_notifier),
    db: AsyncSession = Depends(get_db)
):
    """Approving a submission thanks the user with a notification"""
    return ensure_success(await FinancialSupportService(db, notifier).update_support_status(support_id, request.status))

@router.delete("/{support_id}", response_model=ActionResult)
async def delete_support(
    support_id: int,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return ensure_success(await FinancialSupportService(db).delete_support(support_id))
