"""API v1 routes aggregation"""

from fastapi import APIRouter

from .points.router import router as points_router
from .badges.router import router as badges_router
from .pickups.router import router as pickups_router
from .donations.router import router as donations_router
from .redemptions.router import router as redemptions_router
from .vouchers.router import router as vouchers_router
from .financial_support.router import router as financial_support_router

# Create v1 router
api_router = APIRouter()

# Include all routers
api_router.include_router(points_router, prefix="/points", tags=["Points"])
api_router.include_router(badges_router, prefix="/badges", tags=["Badges"])
api_router.include_router(pickups_router, prefix="/pickups", tags=["Pickups"])
api_router.include_router(donations_router, prefix="/donations", tags=["Donations"])
api_router.include_router(redemptions_router, prefix="/redemptions", tags=["Redemptions"])
api_router.include_router(vouchers_router, prefix="/vouchers", tags=["Vouchers"])
api_router.include_router(financial_support_router, prefix="/financial-support", tags=["Financial Support"])

# Export router
router = api_router
