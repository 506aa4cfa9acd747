"""Unit tests for the maintenance workers and the idempotency store."""

import asyncio
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import select

from app.core.config import Settings
from app.models.deal import Deal
from app.models.idempotency import IdempotencyRecord
from app.services.catalog_service import DealService
from app.services.idempotency_service import (
    IdempotencyMismatchError,
    IdempotencyService,
    compute_request_hash,
)
from app.workers.base import BaseWorker
from app.workers.deal_expiry_worker import DealExpiryWorker
from app.workers.idempotency_cleanup_worker import IdempotencyCleanupWorker
from app.workers.manager import WorkerManager


def test_request_hash_ignores_key_order():
    assert compute_request_hash({"a": 1, "b": 2}) == compute_request_hash({"b": 2, "a": 1})
    assert compute_request_hash({"a": 1}) != compute_request_hash({"a": 2})


@pytest.mark.asyncio
async def test_idempotency_store_and_replay(test_session):
    service = IdempotencyService(test_session)
    body = {"customer_name": "Ayesha Khan"}

    assert await service.check_idempotency("key-1", "bookings/create", body) is None

    await service.store_response("key-1", "bookings/create", body, 200, {"booking": {"id": "abc"}})

    assert await service.check_idempotency("key-1", "bookings/create", body) == (200, {"booking": {"id": "abc"}})
    # Keys are scoped per operation
    assert await service.check_idempotency("key-1", "feedback/create", body) is None

    with pytest.raises(IdempotencyMismatchError):
        await service.check_idempotency("key-1", "bookings/create", {"customer_name": "Someone Else"})


@pytest.mark.asyncio
async def test_idempotency_cleanup_worker_removes_expired(test_session):
    now = datetime.utcnow()
    test_session.add_all([
        IdempotencyRecord(
            idempotency_key="old", method="bookings/create", request_body_hash="x" * 64,
            response_status_code=200, response_body="{}", expires_at=now - timedelta(hours=1),
        ),
        IdempotencyRecord(
            idempotency_key="fresh", method="bookings/create", request_body_hash="y" * 64,
            response_status_code=200, response_body="{}", expires_at=now + timedelta(hours=1),
        ),
    ])
    await test_session.commit()

    await IdempotencyCleanupWorker().run_once()

    remaining = (await test_session.execute(select(IdempotencyRecord.idempotency_key))).scalars().all()
    assert remaining == ["fresh"]


@pytest.mark.asyncio
async def test_deal_expiry_worker(test_session):
    yesterday = datetime.utcnow().date() - timedelta(days=1)
    test_session.add_all([
        Deal(title="Ended", valid_until=yesterday, is_active=True),
        Deal(title="Running", valid_until=date.max, is_active=True),
    ])
    await test_session.commit()

    await DealExpiryWorker().run_once()

    test_session.expunge_all()
    active = await DealService(test_session).list_items(active=True)
    assert [deal.title for deal in active] == ["Running"]


class FlakyWorker(BaseWorker):
    """Fails on its first iteration, then counts."""

    def __init__(self):
        super().__init__(name="Flaky", interval_seconds=0)
        self.calls = 0

    async def process(self) -> None:
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("transient failure")


@pytest.mark.asyncio
async def test_worker_survives_iteration_errors():
    worker = FlakyWorker()

    await worker.start()
    assert worker.running is True
    for _ in range(50):
        if worker.calls >= 3:
            break
        await asyncio.sleep(0.01)
    await worker.stop()

    assert worker.calls >= 3
    assert worker.running is False


@pytest.mark.asyncio
async def test_worker_manager_lifecycle():
    manager = WorkerManager(Settings(deal_expiry_interval_seconds=3600, idempotency_cleanup_interval_seconds=3600))

    assert manager.get_worker_status() == {"deal_expiry": False, "idempotency_cleanup": False}
    assert isinstance(manager.workers["deal_expiry"], DealExpiryWorker)
    assert manager.workers["deal_expiry"].interval_seconds == 3600

    # Replace the database-backed workers so the loop runs without a schema
    manager.workers = {"flaky": FlakyWorker()}
    await manager.start_all()
    assert manager.get_worker_status() == {"flaky": True}

    await manager.stop_all()
    assert manager.get_worker_status() == {"flaky": False}
