"""Point settings: the singleton row driving automatic grants"""

from typing import Optional
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from cleanhood.core.config import settings
from cleanhood.core.exceptions import ValidationException
from cleanhood.models import PointSettings, SETTINGS_ROW_ID
from cleanhood.schemas.base import ActionResult
from cleanhood.services.base import TransactionalService, transactional

logger = logging.getLogger(__name__)

RATE_FIELDS = ("recycling_per_kg", "organic_per_kg", "donation_per_piece")

def default_point_settings() -> PointSettings:
    """Transient settings object used when the row does not exist"""
    return PointSettings(
        id=SETTINGS_ROW_ID,
        auto_grant_enabled=settings.DEFAULT_AUTO_GRANT_ENABLED,
        recycling_per_kg=settings.DEFAULT_RECYCLING_PER_KG,
        organic_per_kg=settings.DEFAULT_ORGANIC_PER_KG,
        donation_per_piece=settings.DEFAULT_DONATION_PER_PIECE,
    )

async def get_point_settings(db: AsyncSession) -> PointSettings:
    """Read the settings fresh from the database, never from the identity map"""
    row = await db.get(PointSettings, SETTINGS_ROW_ID, populate_existing=True)
    return row if row is not None else default_point_settings()

class PointSettingsService(TransactionalService):
    """Admin updates to the automatic grant configuration"""

    @transactional("Update point settings")
    async def update_point_settings(
        self,
        auto_grant_enabled: Optional[bool] = None,
        recycling_per_kg: Optional[int] = None,
        organic_per_kg: Optional[int] = None,
        donation_per_piece: Optional[int] = None,
    ) -> ActionResult:
        rates = {
            "recycling_per_kg": recycling_per_kg,
            "organic_per_kg": organic_per_kg,
            "donation_per_piece": donation_per_piece,
        }
        for field, value in rates.items():
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValidationException(f"{field} must be a non-negative whole number.")

        row = await self.db.get(PointSettings, SETTINGS_ROW_ID, with_for_update=True)
        if row is None:
            row = default_point_settings()
            self.db.add(row)

        if auto_grant_enabled is not None:
            row.auto_grant_enabled = auto_grant_enabled
        for field, value in rates.items():
            if value is not None:
                setattr(row, field, value)
        await self.db.flush()

        logger.info(
            "Point settings updated: auto_grant=%s recycling=%s organic=%s donation=%s",
            row.auto_grant_enabled, row.recycling_per_kg, row.organic_per_kg, row.donation_per_piece
        )
        return ActionResult.ok(
            "Settings saved.",
            auto_grant_enabled=row.auto_grant_enabled,
            **{field: getattr(row, field) for field in RATE_FIELDS},
        )
