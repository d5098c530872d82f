"""Financial support submissions"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric, Text
from sqlalchemy.sql import func
import enum

from .base import Base, enum_type

class FinancialSupportStatus(str, enum.Enum):
    PENDING_REVIEW = "pending_review"
    APPROVED = "approved"
    REJECTED = "rejected"

class FinancialSupport(Base):
    """Money sent by a resident to support the service; no ledger effect"""

    __tablename__ = "financial_support"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    bank_name = Column(String(100), nullable=False)
    receipt_url = Column(Text, nullable=False)
    status = Column(
        enum_type(FinancialSupportStatus),
        nullable=False,
        default=FinancialSupportStatus.PENDING_REVIEW
    )
    submitted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
