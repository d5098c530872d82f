"""
Partner voucher models
Finite stock exchanged for points
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, Index, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from .base import Base, TimestampedModel, enum_type

class VoucherStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

class VoucherRedemptionStatus(str, enum.Enum):
    PENDING_REVIEW = "pending_review"
    PROCESSED = "processed"

class Voucher(Base, TimestampedModel):
    """Partner discount voucher"""

    __tablename__ = "vouchers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    partner_name = Column(String(100), nullable=False)
    partner_logo_url = Column(Text, nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    points_required = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False, default=0)  # Remaining stock
    status = Column(enum_type(VoucherStatus), nullable=False, default=VoucherStatus.ACTIVE)

    # Constraints
    __table_args__ = (
        CheckConstraint("points_required > 0", name="check_positive_points_required"),
        CheckConstraint("quantity >= 0", name="check_non_negative_voucher_stock"),
    )

class VoucherRedemption(Base):
    """History of voucher exchanges; processing it never touches the ledger"""

    __tablename__ = "voucher_redemptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    voucher_id = Column(Integer, ForeignKey("vouchers.id", ondelete="CASCADE"), nullable=False)
    status = Column(
        enum_type(VoucherRedemptionStatus),
        nullable=False,
        default=VoucherRedemptionStatus.PENDING_REVIEW
    )
    coupon_code = Column(String(255), nullable=True)
    request_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    voucher = relationship("Voucher", lazy="joined")

    __table_args__ = (
        Index("idx_voucher_redemptions_user", "user_id"),
    )
