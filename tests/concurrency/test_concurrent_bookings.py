"""Concurrency tests for booking reconciliation."""

import asyncio
from datetime import date

import pytest

from tourdesk.schemas.booking import Booking, ResourceType
from tourdesk.services.availability_service import resolve_slot

DAY = date(2026, 11, 10)


def tour_booking(booking_id: str) -> Booking:
    return Booking(id=booking_id, type=ResourceType.TOUR, date=DAY.isoformat(), package_id="PKG-002", guests="1 Adult")


@pytest.mark.asyncio
async def test_concurrent_tour_bookings_all_count(engine, ledger, booking_writer, override_writer):
    """Every concurrent creation raises the counter; none is lost."""
    booking_writer.delay = 0.01
    num_concurrent_requests = 50

    results = await asyncio.gather(*(
        engine.create_booking(tour_booking(f"b{i}"))
        for i in range(num_concurrent_requests)
    ))

    assert all(result.committed for result in results)
    assert ledger.overrides.peek(DAY).booked == num_concurrent_requests
    assert len(ledger.bookings) == num_concurrent_requests
    assert override_writer.rows[DAY].booked == num_concurrent_requests


@pytest.mark.asyncio
async def test_concurrent_rollbacks_only_undo_their_own_increment(engine, ledger, booking_writer):
    """Failed creations interleaved with successful ones leave exactly the successes."""
    booking_writer.delay = 0.01
    booking_writer.fail_ids = {f"b{i}" for i in range(0, 20, 3)}

    results = await asyncio.gather(*(
        engine.create_booking(tour_booking(f"b{i}"))
        for i in range(20)
    ))

    committed = [r.booking.id for r in results if r.committed]
    rolled_back = [r.booking.id for r in results if not r.committed]
    assert set(rolled_back) == booking_writer.fail_ids
    assert ledger.overrides.peek(DAY).booked == len(committed)
    assert {b.id for b in ledger.bookings} == set(committed)


@pytest.mark.asyncio
async def test_concurrent_car_bookings_are_replayed(engine, ledger, booking_writer):
    """Car occupancy counts exactly the bookings that committed."""
    booking_writer.delay = 0.01
    booking_writer.fail_ids = {"c0", "c1"}

    await asyncio.gather(*(
        engine.create_booking(
            Booking(id=f"c{i}", type=ResourceType.CAR, date=DAY.isoformat(), title="Innova Crysta Rental")
        )
        for i in range(8)
    ))

    slot = resolve_slot(ResourceType.CAR, "TRN-001", DAY, ledger.catalog, ledger.overrides, ledger.bookings)
    assert slot.booked == 6
    assert slot.capacity == 6


@pytest.mark.asyncio
async def test_refreshes_between_concurrent_creations_lose_nothing(
    engine, ledger, booking_writer, override_writer, master_data
):
    """Mirror refreshes landing mid-flight neither drop nor double any increment."""
    booking_writer.delay = 0.01
    booking_writer.fail_ids = {f"b{i}" for i in range(0, 30, 4)}

    async def refresh_sometimes(booking):
        if booking.id.endswith("5"):
            await ledger.refresh(booking_writer, override_writer, master_data)

    booking_writer.on_write = refresh_sometimes

    results = await asyncio.gather(*(
        engine.create_booking(tour_booking(f"b{i}"))
        for i in range(30)
    ))

    committed = {r.booking.id for r in results if r.committed}
    assert committed == {f"b{i}" for i in range(30)} - booking_writer.fail_ids
    assert ledger.overrides.peek(DAY).booked == len(committed)
    assert {b.id for b in ledger.bookings} == committed

    booking_writer.on_write = None
    await ledger.refresh(booking_writer, override_writer, master_data)

    assert {b.id for b in ledger.bookings} == committed
