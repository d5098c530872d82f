"""Clothing donation model"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, Index, CheckConstraint
from sqlalchemy.sql import func
import enum

from .base import Base, enum_type

class DonationStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    RECEIVED = "received"
    REJECTED = "rejected"

class Donation(Base):
    """Clothing donation request"""

    __tablename__ = "donations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    clothing_type = Column(String(50), nullable=False)
    condition = Column(String(50), nullable=False)
    quantity = Column(Integer, nullable=False)  # pieces
    pickup_address = Column(String(255), nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(enum_type(DonationStatus), nullable=False, default=DonationStatus.PENDING)
    request_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_positive_donation_quantity"),
        Index("idx_donations_status", "status"),
    )
