"""Services package"""

from .notification import NotificationService
from .points_ledger import PointsLedger
from .ledger_service import LedgerService
from .point_settings_service import PointSettingsService
from .badge_service import BadgeService
from .pickup_service import PickupService
from .donation_service import DonationService
from .redemption_service import RedemptionService
from .voucher_service import VoucherService
from .financial_support_service import FinancialSupportService

__all__ = [
    "NotificationService",
    "PointsLedger",
    "LedgerService",
    "PointSettingsService",
    "BadgeService",
    "PickupService",
    "DonationService",
    "RedemptionService",
    "VoucherService",
    "FinancialSupportService",
]
