"""
Redemption schemas for request/response validation
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

from cleanhood.models.redemption import RedemptionStatus
from cleanhood.schemas.base import BaseSchema

class RedemptionCreate(BaseModel):
    """
    Cash-out request

    The amount is always computed by the server; points defaults to the
    whole available balance.
    """
    bank_name: str = Field(..., min_length=1, max_length=100)
    account_holder: str = Field(..., min_length=1, max_length=100)
    account_number: str = Field(..., min_length=1, max_length=50)
    points: Optional[int] = Field(None, gt=0)

class RedemptionStatusUpdate(BaseModel):
    status: RedemptionStatus

class RedemptionResponse(BaseSchema):
    id: int
    user_id: int
    points_redeemed: int
    amount: Decimal
    bank_name: str
    account_holder: str
    account_number: str
    status: RedemptionStatus
    request_date: datetime
