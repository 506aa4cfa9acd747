"""Background worker for purging expired idempotency records."""

import logging

from ..core.database import async_session_factory
from ..services.idempotency_service import IdempotencyService
from .base import BaseWorker

logger = logging.getLogger(__name__)


class IdempotencyCleanupWorker(BaseWorker):
    """Deletes stored responses whose replay window has closed."""

    def __init__(self, interval_seconds: int = 3600):
        super().__init__(name="IdempotencyCleanup", interval_seconds=interval_seconds)

    async def process(self) -> None:
        async with async_session_factory() as db:
            try:
                deleted_count = await IdempotencyService(db).cleanup_expired_records()
            except Exception:
                await db.rollback()
                raise

        if deleted_count > 0:
            logger.info(
                f"Removed {deleted_count} expired idempotency records",
                extra={"deleted_count": deleted_count, "worker": self.name}
            )
