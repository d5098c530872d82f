"""
Common dependencies for FastAPI
"""

from typing import Dict, Any
from fastapi import Query

from cleanhood.core.exceptions import CleanhoodException, ForbiddenException
from cleanhood.schemas.base import ActionResult
from cleanhood.services.notification import NotificationService
from .pagination import PaginationParams

# HTTP status for each service error code
ERROR_STATUS = {
    "VALIDATION_ERROR": 422,
    "NOT_FOUND": 404,
    "INSUFFICIENT_POINTS": 400,
    "VOUCHER_UNAVAILABLE": 400,
    "INVALID_STATUS_TRANSITION": 400,
    "BADGE_ALREADY_GRANTED": 409,
    "STATUS_CONFLICT": 409,
    "LEDGER_CONFLICT": 503,
    "DATABASE_ERROR": 503,
}

def get_pagination_params(
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(50, ge=1, le=200, description="Page size")
) -> PaginationParams:
    """Get pagination parameters from query"""
    return PaginationParams(page=page, size=size)

def ensure_success(result: ActionResult) -> ActionResult:
    """
    Turn a failed ActionResult into an HTTP error

    Raises:
        CleanhoodException: carrying the result's message and error code
    """
    if result.success:
        return result
    raise CleanhoodException(
        status_code=ERROR_STATUS.get(result.error_code, 400),
        detail=result.message,
        error_code=result.error_code,
    )

def ensure_self_or_admin(user_id: int, current_user: Dict[str, Any]) -> None:
    """Residents may only read their own ledger data"""
    if current_user.get("role") != "admin" and current_user.get("id") != user_id:
        raise ForbiddenException("You can only view your own account")

def get_notifier() -> NotificationService:
    """Notification dispatcher used by services after commit"""
    return NotificationService()
