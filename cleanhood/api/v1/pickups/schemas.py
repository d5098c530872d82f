"""
Pickup schemas for request/response validation
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

from cleanhood.models.pickup import PickupStatus, MaterialCategory
from cleanhood.schemas.base import BaseSchema

class PickupItemCreate(BaseModel):
    item_name: str = Field(..., min_length=1, max_length=100)
    quantity: int = Field(..., gt=0, description="Weight in kg")

class PickupCreate(BaseModel):
    """Schema for scheduling a pickup"""
    pickup_date: date
    items: List[PickupItemCreate] = Field(..., min_length=1)
    notes: Optional[str] = None
    user_id: Optional[int] = Field(None, description="Admins may schedule on behalf of a resident")

class PickupStatusUpdate(BaseModel):
    status: PickupStatus

class PickupItemResponse(BaseSchema):
    item_name: str
    quantity: int
    category: MaterialCategory

class PickupResponse(BaseSchema):
    id: int
    user_id: int
    pickup_date: date
    status: PickupStatus
    notes: Optional[str] = None
    request_date: datetime
    items: List[PickupItemResponse]
