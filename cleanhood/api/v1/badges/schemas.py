"""Badge schemas"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from cleanhood.schemas.base import BaseSchema

class BadgeResponse(BaseSchema):
    id: int
    name: str
    description: str
    icon_name: Optional[str] = None

class UserBadgeResponse(BaseSchema):
    badge: BadgeResponse
    earned_at: datetime

class BadgeAssignment(BaseModel):
    user_id: int
    badge_id: int
