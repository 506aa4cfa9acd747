"""Worker manager for coordinating background tasks."""

import asyncio
import logging
from typing import Dict

from ..core.config import Settings, settings
from .base import BaseWorker
from .deal_expiry_worker import DealExpiryWorker
from .idempotency_cleanup_worker import IdempotencyCleanupWorker

logger = logging.getLogger(__name__)


class WorkerManager:
    """Starts and stops the in-process maintenance workers together."""

    def __init__(self, config: Settings = settings):
        self.workers: Dict[str, BaseWorker] = {
            "deal_expiry": DealExpiryWorker(interval_seconds=config.deal_expiry_interval_seconds),
            "idempotency_cleanup": IdempotencyCleanupWorker(
                interval_seconds=config.idempotency_cleanup_interval_seconds
            ),
        }

    async def start_all(self) -> None:
        for name, worker in self.workers.items():
            try:
                await worker.start()
            except Exception as e:
                logger.error(f"Failed to start worker {name}: {e!s}", exc_info=True)

        logger.info(f"Started {len(self.workers)} workers")

    async def stop_all(self) -> None:
        """Stop all workers, logging rather than raising individual failures."""
        results = await asyncio.gather(
            *(worker.stop() for worker in self.workers.values()),
            return_exceptions=True,
        )

        for name, result in zip(self.workers, results):
            if isinstance(result, Exception):
                logger.error(f"Error stopping worker {name}: {result!s}")

        logger.info("All workers stopped")

    def get_worker_status(self) -> Dict[str, bool]:
        return {name: worker.running for name, worker in self.workers.items()}


# Global worker manager instance
worker_manager = WorkerManager()
