"""Models package initialization"""

from .base import Base
from .user import User, UserRole
from .points import PointsLog, PointSettings, LogType, SourceType, SETTINGS_ROW_ID
from .badge import Badge, UserBadge
from .pickup import Pickup, PickupItem, PickupStatus, MaterialCategory
from .donation import Donation, DonationStatus
from .redemption import RedemptionRequest, RedemptionStatus
from .voucher import Voucher, VoucherRedemption, VoucherStatus, VoucherRedemptionStatus
from .financial_support import FinancialSupport, FinancialSupportStatus
from .notification import Notification, NotificationAudience

# Export all models
__all__ = [
    "Base",
    "User",
    "UserRole",
    "PointsLog",
    "PointSettings",
    "LogType",
    "SourceType",
    "SETTINGS_ROW_ID",
    "Badge",
    "UserBadge",
    "Pickup",
    "PickupItem",
    "PickupStatus",
    "MaterialCategory",
    "Donation",
    "DonationStatus",
    "RedemptionRequest",
    "RedemptionStatus",
    "Voucher",
    "VoucherRedemption",
    "VoucherStatus",
    "VoucherRedemptionStatus",
    "FinancialSupport",
    "FinancialSupportStatus",
    "Notification",
    "NotificationAudience",
]
