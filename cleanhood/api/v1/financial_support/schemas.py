"""Financial support schemas"""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal

from cleanhood.models.financial_support import FinancialSupportStatus
from cleanhood.schemas.base import BaseSchema

class SupportCreate(BaseModel):
    amount: Decimal = Field(..., gt=0)
    bank_name: str = Field(..., min_length=1, max_length=100)
    receipt_url: str = Field(..., min_length=1)

class SupportStatusUpdate(BaseModel):
    status: FinancialSupportStatus

class SupportResponse(BaseSchema):
    id: int
    user_id: int
    amount: Decimal
    bank_name: str
    receipt_url: str
    status: FinancialSupportStatus
    submitted_at: datetime
