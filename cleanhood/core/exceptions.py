"""
Custom exception classes and error handlers
Provides consistent error responses across the application
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional, Sequence

GENERIC_FAILURE_MESSAGE = "Could not complete the action. Please try again."

class CleanhoodException(HTTPException):
    """Base exception class for the rewards application"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code

class BadRequestException(CleanhoodException):
    """400 Bad Request"""

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )

class UnauthorizedException(CleanhoodException):
    """401 Unauthorized"""

    def __init__(self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"}
        )

class ForbiddenException(CleanhoodException):
    """403 Forbidden"""

    def __init__(self, detail: str = "Forbidden", error_code: str = "FORBIDDEN"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code=error_code
        )

class NotFoundException(CleanhoodException):
    """404 Not Found"""

    def __init__(self, detail: str = "Not found", error_code: str = "NOT_FOUND"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code
        )

class ConflictException(CleanhoodException):
    """409 Conflict"""

    def __init__(self, detail: str, error_code: str = "CONFLICT"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=error_code
        )

class ValidationException(CleanhoodException):
    """422 Unprocessable Entity"""

    def __init__(self, detail: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code=error_code
        )

class ServiceUnavailableException(CleanhoodException):
    """503 Service Unavailable"""

    def __init__(
        self,
        detail: str = GENERIC_FAILURE_MESSAGE,
        error_code: str = "DATABASE_ERROR"
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            error_code=error_code
        )

# Business logic exceptions
class InsufficientPointsException(BadRequestException):
    """Balance too low for a strict debit"""

    def __init__(self, required: int, available: int):
        super().__init__(
            detail=f"Not enough points: {required} required, {available} available.",
            error_code="INSUFFICIENT_POINTS"
        )

class VoucherUnavailableException(BadRequestException):
    """Voucher inactive or out of stock"""

    def __init__(self, detail: str = "This voucher is no longer available."):
        super().__init__(
            detail=detail,
            error_code="VOUCHER_UNAVAILABLE"
        )

class BadgeAlreadyGrantedException(ConflictException):
    """Unique (user, badge) pair already present"""

    def __init__(self):
        super().__init__(
            detail="User already has this badge.",
            error_code="BADGE_ALREADY_GRANTED"
        )

class InvalidStatusTransitionException(BadRequestException):
    """Status change not allowed by the state machine"""

    def __init__(self, entity: str, current: str, requested: str, allowed: Sequence[str] = ()):
        if allowed:
            hint = f" Allowed next statuses: {', '.join(allowed)}."
        else:
            hint = f" A {entity} that is '{current}' can no longer change."
        super().__init__(
            detail=f"Cannot move {entity} from '{current}' to '{requested}'.{hint}",
            error_code="INVALID_STATUS_TRANSITION"
        )

class StatusConflictException(ConflictException):
    """Status changed by a concurrent request between read and write"""

    def __init__(self, entity: str):
        super().__init__(
            detail=f"This {entity} was updated by someone else. Please refresh and try again.",
            error_code="STATUS_CONFLICT"
        )

class LedgerConflictException(ServiceUnavailableException):
    """A guarded balance update matched no row: the balance changed under us"""

    def __init__(self, user_id: int):
        super().__init__(error_code="LEDGER_CONFLICT")
        self.user_id = user_id

async def cleanhood_exception_handler(request: Request, exc: CleanhoodException) -> JSONResponse:
    """Render domain exceptions with their error code"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.detail,
            "error_code": exc.error_code,
        },
        headers=exc.headers,
    )
