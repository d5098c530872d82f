"""
User model
Holds identity plus the ledger balance column
"""

from sqlalchemy import Column, String, Integer, Index, CheckConstraint
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, enum_type

class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"

class User(Base, TimestampedModel):
    """Resident account"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(100), nullable=False)
    phone_number = Column(String(20), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=True)
    role = Column(enum_type(UserRole), default=UserRole.USER, nullable=False)
    address = Column(String(255), nullable=True)

    # Ledger balance, written only by the points ledger primitives
    points_balance = Column(Integer, default=0, nullable=False)

    # Relationships
    points_log = relationship("PointsLog", back_populates="user", order_by="PointsLog.id")
    badges = relationship("UserBadge", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("points_balance >= 0", name="check_non_negative_points"),
        Index("idx_users_points_balance", "points_balance"),
    )

    def __repr__(self):
        return f"<User {self.id} {self.full_name}>"
