"""Background maintenance workers."""

from .deal_expiry_worker import DealExpiryWorker
from .idempotency_cleanup_worker import IdempotencyCleanupWorker

__all__ = ["DealExpiryWorker", "IdempotencyCleanupWorker"]
