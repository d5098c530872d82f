"""Ledger background tasks"""

import asyncio
import logging
from typing import Any, Dict, List

from cleanhood.core.celery_app import celery_app
from cleanhood.core.config import settings
from cleanhood.core.database import create_engine_for, create_session_factory, get_db_context
from cleanhood.services.ledger_service import find_balance_drift

logger = logging.getLogger(__name__)

async def _audit(url: str) -> List[Dict[str, Any]]:
    # Each run gets its own engine: pooled connections cannot cross event loops
    engine = create_engine_for(url)
    try:
        async with get_db_context(create_session_factory(engine)) as session:
            return await find_balance_drift(session)
    finally:
        await engine.dispose()

@celery_app.task(name="cleanhood.tasks.ledger_tasks.audit_points_ledger")
def audit_points_ledger() -> Dict[str, Any]:
    """Compare every balance with the sum of its ledger entries; read-only"""
    drift = asyncio.run(_audit(settings.database_url_async))

    for row in drift:
        logger.error(
            "User %s balance %s does not match ledger total %s",
            row["user_id"], row["balance"], row["log_total"]
        )
    if not drift:
        logger.info("Points ledger audit passed")

    return {"consistent": not drift, "drift": drift}
