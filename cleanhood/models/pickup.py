"""
Pickup models
A pickup moves scheduled -> completed | cancelled exactly once
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime, Text, Index, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from .base import Base, enum_type

class PickupStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class MaterialCategory(str, enum.Enum):
    RECYCLABLE = "recyclable"
    ORGANIC = "organic"
    GENERAL = "general"

class Pickup(Base):
    """Scheduled waste pickup for a household"""

    __tablename__ = "pickups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    pickup_date = Column(Date, nullable=False)
    status = Column(enum_type(PickupStatus), nullable=False, default=PickupStatus.SCHEDULED)
    notes = Column(Text, nullable=True)
    request_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    items = relationship(
        "PickupItem",
        back_populates="pickup",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_pickups_user_status", "user_id", "status"),
    )

class PickupItem(Base):
    """One line of a pickup; category is resolved when the item is recorded"""

    __tablename__ = "pickup_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pickup_id = Column(Integer, ForeignKey("pickups.id", ondelete="CASCADE"), nullable=False)
    item_name = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)  # kg
    category = Column(enum_type(MaterialCategory), nullable=False, default=MaterialCategory.GENERAL)

    # Relationships
    pickup = relationship("Pickup", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_positive_item_quantity"),
    )
