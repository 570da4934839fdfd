"""Tests for the background mirror refresh."""

import asyncio
from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tourdesk.core.config import Settings
from tourdesk.schemas.booking import Booking, ResourceType
from tourdesk.services.ledger import Ledger
from tourdesk.services.repositories import SqlBookingRepository
from tourdesk.workers.manager import WorkerManager
from tourdesk.workers.mirror_refresh_worker import MirrorRefreshWorker, refresh_ledger


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.mark.asyncio
async def test_refresh_ledger(session_factory):
    async with session_factory() as db:
        await SqlBookingRepository(db).create_booking(Booking(id="b1", type=ResourceType.CAR, date="2026-11-10"))
    ledger = Ledger()

    await refresh_ledger(ledger, session_factory)

    assert "b1" in ledger.bookings


@pytest.mark.asyncio
async def test_worker_refreshes_until_stopped(session_factory):
    ledger = Ledger()
    worker = MirrorRefreshWorker(ledger, interval_seconds=0.01, session_factory=session_factory)

    async with session_factory() as db:
        await SqlBookingRepository(db).create_booking(Booking(id="b1", type=ResourceType.BUS, date="2026-11-10"))

    await worker.start()
    assert worker.running
    await asyncio.sleep(0.1)
    await worker.stop()

    assert not worker.running
    assert worker.iterations >= 1
    assert "b1" in ledger.bookings


def test_manager_honours_settings():
    ledger = Ledger()

    disabled = WorkerManager.for_ledger(ledger, Settings(enable_mirror_refresh=False))
    enabled = WorkerManager.for_ledger(ledger, Settings(enable_mirror_refresh=True, mirror_refresh_interval_seconds=5))

    assert disabled.workers == {}
    assert enabled.get_worker_status() == {"mirror_refresh": False}
    assert enabled.get_worker("mirror_refresh").interval_seconds == 5


@pytest.mark.asyncio
async def test_refresh_keeps_rows_awaiting_their_write(session_factory):
    day = date(2026, 11, 10)
    ledger = Ledger()
    ledger.bookings.append(Booking(id="pending", type=ResourceType.TOUR, date=day.isoformat()))
    ledger.bookings.hold("pending")
    ledger.overrides.increment_booked(day)
    ledger.overrides.hold(day)
    worker = MirrorRefreshWorker(ledger, session_factory=session_factory)

    await worker.process()

    assert "pending" in ledger.bookings
    assert ledger.overrides.peek(day).booked == 1

    ledger.bookings.release("pending")
    ledger.overrides.release(day)
    await worker.process()

    assert "pending" not in ledger.bookings
    assert len(ledger.overrides) == 0
