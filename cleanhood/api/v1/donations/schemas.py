"""Donation schemas"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from cleanhood.models.donation import DonationStatus
from cleanhood.schemas.base import BaseSchema

class DonationCreate(BaseModel):
    clothing_type: str = Field(..., min_length=1, max_length=50)
    condition: str = Field(..., min_length=1, max_length=50)
    quantity: int = Field(..., ge=1, description="Number of pieces")
    pickup_address: str = Field(..., min_length=10, max_length=255)
    notes: Optional[str] = None

class DonationStatusUpdate(BaseModel):
    status: DonationStatus

class DonationResponse(BaseSchema):
    id: int
    user_id: int
    clothing_type: str
    condition: str
    quantity: int
    status: DonationStatus
    request_date: datetime
