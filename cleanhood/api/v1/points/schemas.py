"""
Points schemas for request/response validation
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from cleanhood.models.points import LogType, SourceType
from cleanhood.schemas.base import BaseSchema

class PointsAdjustRequest(BaseModel):
    """Manual grant or deduction by an admin"""
    user_id: int
    points: int = Field(..., gt=0)
    reason: Optional[str] = Field(None, max_length=255)

class BalanceResponse(BaseModel):
    user_id: int
    points_balance: int

class PointsLogEntry(BaseSchema):
    id: int
    delta: int
    requested_points: int
    log_type: LogType
    reason: Optional[str] = None
    source_type: SourceType
    source_id: Optional[int] = None
    created_at: datetime

class PointsLogResponse(BaseModel):
    user_id: int
    items: List[PointsLogEntry]
    page: int
    size: int

class PointSettingsResponse(BaseSchema):
    auto_grant_enabled: bool
    recycling_per_kg: int
    organic_per_kg: int
    donation_per_piece: int

class PointSettingsUpdate(BaseModel):
    """Only the provided fields are changed"""
    auto_grant_enabled: Optional[bool] = None
    recycling_per_kg: Optional[int] = Field(None, ge=0)
    organic_per_kg: Optional[int] = Field(None, ge=0)
    donation_per_piece: Optional[int] = Field(None, ge=0)

class LeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    full_name: str
    points_balance: int
    badges: List[str]
