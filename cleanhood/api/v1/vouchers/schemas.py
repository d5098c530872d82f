"""Voucher schemas"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from cleanhood.models.voucher import VoucherStatus, VoucherRedemptionStatus
from cleanhood.schemas.base import BaseSchema

class VoucherCreate(BaseModel):
    partner_name: str = Field(..., min_length=1, max_length=100)
    partner_logo_url: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=255)
    description: str
    points_required: int = Field(..., gt=0)
    quantity: int = Field(..., ge=0)
    status: VoucherStatus = VoucherStatus.ACTIVE

class VoucherUpdate(BaseModel):
    """Partial edit; only the fields sent are changed"""
    partner_name: Optional[str] = Field(None, min_length=1, max_length=100)
    partner_logo_url: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    points_required: Optional[int] = Field(None, gt=0)
    quantity: Optional[int] = Field(None, ge=0)
    status: Optional[VoucherStatus] = None

class VoucherResponse(BaseSchema):
    id: int
    partner_name: str
    partner_logo_url: Optional[str] = None
    title: str
    description: str
    points_required: int
    quantity: int
    status: VoucherStatus

class CouponCodeRequest(BaseModel):
    coupon_code: str = Field(..., min_length=1, max_length=255)

class VoucherRedemptionResponse(BaseSchema):
    id: int
    user_id: int
    voucher_id: int
    status: VoucherRedemptionStatus
    coupon_code: Optional[str] = None
    request_date: datetime
