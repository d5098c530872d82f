"""Badge catalog and user badge register"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base

DEFAULT_BADGES = (
    ("beginner_recycler", "First step into recycling!", "Star"),
    ("plastic_free_pioneer", "Pioneer in cutting plastic use", "Award"),
    ("compost_champion", "Champion of turning organic waste into compost", "Star"),
    ("waste_warrior", "The neighborhood's top waste warrior", "Shield"),
)

class Badge(Base):
    """Static achievement catalog"""

    __tablename__ = "badges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(255), nullable=False)
    icon_name = Column(String(50), nullable=True)

class UserBadge(Base):
    """A badge held by a user; no point value attached"""

    __tablename__ = "user_badges"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    badge_id = Column(Integer, ForeignKey("badges.id", ondelete="CASCADE"), nullable=False)
    earned_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="badges")
    badge = relationship("Badge", lazy="joined")

    __table_args__ = (
        UniqueConstraint("user_id", "badge_id", name="uq_user_badges_user_badge"),
    )
