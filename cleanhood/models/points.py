"""Points ledger models"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, Index, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from .base import Base, TimestampedModel, enum_type

SETTINGS_ROW_ID = 1

class LogType(str, enum.Enum):
    GRANT = "grant"
    DEDUCT = "deduct"
    REDEEM_VOUCHER = "redeem_voucher"
    REDEEM_CASH = "redeem_cash"

class SourceType(str, enum.Enum):
    ADMIN = "admin"
    PICKUP = "pickup"
    DONATION = "donation"
    VOUCHER = "voucher"
    REDEMPTION = "redemption"

class PointsLog(Base):
    """Append-only record of every balance movement"""

    __tablename__ = "points_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    delta = Column(Integer, nullable=False)  # Positive for grants, negative for deductions
    requested_points = Column(Integer, nullable=False)  # Differs from |delta| only when a deduct was clamped
    log_type = Column(enum_type(LogType), nullable=False)
    reason = Column(String(255), nullable=True)
    source_type = Column(enum_type(SourceType), nullable=False, default=SourceType.ADMIN)
    source_id = Column(Integer, nullable=True)  # Pickup ID, donation ID, voucher ID, etc.
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="points_log")

    __table_args__ = (
        CheckConstraint("requested_points > 0", name="check_positive_requested_points"),
        Index("idx_points_log_user", "user_id", "id"),
        Index("idx_points_log_source", "source_type", "source_id", "log_type"),
    )

class PointSettings(Base, TimestampedModel):
    """Singleton row configuring the automatic grants"""

    __tablename__ = "point_settings"

    id = Column(Integer, primary_key=True, default=SETTINGS_ROW_ID)
    auto_grant_enabled = Column(Boolean, nullable=False, default=True)
    recycling_per_kg = Column(Integer, nullable=False, default=10)
    organic_per_kg = Column(Integer, nullable=False, default=5)
    donation_per_piece = Column(Integer, nullable=False, default=2)

    __table_args__ = (
        CheckConstraint("id = 1", name="check_point_settings_singleton"),
        CheckConstraint(
            "recycling_per_kg >= 0 AND organic_per_kg >= 0 AND donation_per_piece >= 0",
            name="check_non_negative_rates"
        ),
    )
