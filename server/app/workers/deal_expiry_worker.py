"""Background worker for deactivating expired deals."""

import logging

from ..core.database import async_session_factory
from ..core.observability import metrics_collector
from ..services.catalog_service import DealService
from .base import BaseWorker

logger = logging.getLogger(__name__)


class DealExpiryWorker(BaseWorker):
    """
    Background worker that switches off deals past their ``valid_until`` date.

    Keeps the public deals listing and the offer popup from advertising
    promotions that have already ended.
    """

    def __init__(self, interval_seconds: int = 300):
        super().__init__(name="DealExpiry", interval_seconds=interval_seconds)

    async def process(self) -> None:
        async with async_session_factory() as db:
            try:
                expired_count = await DealService(db).expire_deals()
            except Exception:
                await db.rollback()
                raise

        if expired_count > 0:
            metrics_collector.record_deals_expired(expired_count)
            logger.info(
                f"Deactivated {expired_count} expired deals",
                extra={"expired_count": expired_count, "worker": self.name}
            )
