"""Bank cash-out redemption requests"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric, Index, CheckConstraint
from sqlalchemy.sql import func
import enum

from .base import Base, enum_type

class RedemptionStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class RedemptionRequest(Base):
    """
    Request to convert points into a bank transfer
    Points are only debited when an admin marks the request completed
    """

    __tablename__ = "redemptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    points_redeemed = Column(Integer, nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    bank_name = Column(String(100), nullable=False)
    account_holder = Column(String(100), nullable=False)
    account_number = Column(String(50), nullable=False)
    status = Column(enum_type(RedemptionStatus), nullable=False, default=RedemptionStatus.PENDING)
    request_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("points_redeemed > 0", name="check_positive_points_redeemed"),
        Index("idx_redemptions_user_status", "user_id", "status"),
    )
