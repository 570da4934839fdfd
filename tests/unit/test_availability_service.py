"""Unit tests for availability resolution."""

import csv
import io
from datetime import date

import pytest

from tourdesk.schemas.booking import Booking, BookingStatus, ResourceType
from tourdesk.schemas.inventory import DEFAULT_OVERRIDE, ManualOverride, Slot, SlotStatus
from tourdesk.services.availability_service import (
    export_month_csv,
    resolve_month,
    resolve_slot,
    slot_status,
    utilization,
)
from tourdesk.services.catalog_service import ResourceCatalog
from tourdesk.services.override_store import ManualOverrideStore

DAY = date(2026, 11, 10)


def car_booking(title="Innova Crysta Rental", status=BookingStatus.CONFIRMED, day=DAY, **kwargs):
    return Booking(type=ResourceType.CAR, date=day.isoformat(), title=title, status=status, **kwargs)


def bus_booking(guests, status=BookingStatus.CONFIRMED, day=DAY):
    return Booking(type=ResourceType.BUS, date=day.isoformat(), title="Volvo Bus AC", guests=guests, status=status)


class TestTourSlots:
    """Tour occupancy comes from the stored override counter."""

    def test_default_when_no_override(self, sample_catalog):
        slot = resolve_slot(ResourceType.TOUR, "PKG-001", DAY, sample_catalog, ManualOverrideStore(), [])

        assert slot == Slot(date=DAY, capacity=20, booked=0, price=35000, blocked=False)

    def test_booked_is_override_owned(self, sample_catalog):
        overrides = ManualOverrideStore({10: ManualOverride(capacity=20, price=35000, booked=4)})
        bookings = [
            Booking(type=ResourceType.TOUR, date=DAY.isoformat(), package_id="PKG-001")
            for _ in range(9)
        ]

        slot = resolve_slot(ResourceType.TOUR, "PKG-001", DAY, sample_catalog, overrides, bookings)

        assert slot.capacity == 20
        assert slot.booked == 4

    def test_override_keyed_by_day_of_month(self, sample_catalog):
        overrides = ManualOverrideStore({10: ManualOverride(capacity=5, price=100, blocked=True)})

        slot = resolve_slot(ResourceType.TOUR, None, date(2026, 12, 10), sample_catalog, overrides, [])

        assert slot.capacity == 5
        assert slot.blocked is True

    def test_custom_default(self, sample_catalog):
        default = ManualOverride(capacity=8, price=999)

        slot = resolve_slot(ResourceType.TOUR, None, DAY, sample_catalog, {}, [], default)

        assert (slot.capacity, slot.price) == (8, 999)


class TestCarSlots:
    """Car occupancy replays bookings mentioning the vehicle."""

    def test_counts_active_bookings_mentioning_vehicle(self, sample_catalog):
        bookings = [
            car_booking(),
            car_booking(title="Airport drop", details="Innova Crysta requested"),
            car_booking(title="Innova Crysta, 3 days"),
            car_booking(status=BookingStatus.CANCELLED),
            car_booking(title="Swift Dzire Rental"),
            car_booking(day=date(2026, 11, 11)),
        ]

        slot = resolve_slot(ResourceType.CAR, "TRN-001", DAY, sample_catalog, {}, bookings)

        assert slot.capacity == 6
        assert slot.price == 4500
        assert slot.booked == 3

    def test_counts_one_per_booking_regardless_of_guests(self, sample_catalog):
        bookings = [car_booking(guests="5 Adults")]

        slot = resolve_slot(ResourceType.CAR, "TRN-001", DAY, sample_catalog, {}, bookings)

        assert slot.booked == 1

    def test_selects_by_name(self, sample_catalog):
        slot = resolve_slot(ResourceType.CAR, "Swift Dzire", DAY, sample_catalog, {}, [])

        assert slot.capacity == 4

    def test_unknown_ref_falls_back_to_first_vehicle(self, sample_catalog):
        slot = resolve_slot(ResourceType.CAR, "TRN-999", DAY, sample_catalog, {}, [])

        assert slot.capacity == 6

    def test_empty_fleet_gives_zero_slot(self):
        slot = resolve_slot(ResourceType.CAR, "TRN-001", DAY, ResourceCatalog(), {}, [car_booking()])

        assert slot == Slot(date=DAY, capacity=0, booked=0, price=0, blocked=False)


class TestBusSlots:
    """Bus occupancy sums guest headcounts."""

    def test_sums_guest_counts(self, sample_catalog):
        bookings = [bus_booking("10 Adults"), bus_booking("5 Adults, 2 Children")]

        slot = resolve_slot(ResourceType.BUS, "TRN-004", DAY, sample_catalog, {}, bookings)

        assert slot.capacity == 40
        assert slot.booked == 17

    def test_cancelled_and_unparseable(self, sample_catalog):
        bookings = [
            bus_booking("10 Adults", status=BookingStatus.CANCELLED),
            bus_booking("family"),
            bus_booking(None),
        ]

        slot = resolve_slot(ResourceType.BUS, None, DAY, sample_catalog, {}, bookings)

        assert slot.booked == 2

    def test_overbooking_is_reported_not_capped(self, sample_catalog):
        bookings = [bus_booking("30 Adults"), bus_booking("15 Adults")]

        slot = resolve_slot(ResourceType.BUS, None, DAY, sample_catalog, {}, bookings)

        assert slot.booked == 45
        assert slot_status(slot) == SlotStatus.FULL

    def test_no_bus_gives_zero_slot(self):
        slot = resolve_slot(ResourceType.BUS, None, DAY, ResourceCatalog(), {}, [bus_booking("4")])

        assert slot.capacity == 0
        assert slot.booked == 0


def test_hotel_never_counts(sample_catalog):
    bookings = [Booking(type=ResourceType.HOTEL, date=DAY.isoformat(), guests="2 Adults")]

    slot = resolve_slot(ResourceType.HOTEL, None, DAY, sample_catalog, {}, bookings)

    assert slot.capacity == 0
    assert slot.booked == 0


def test_resolve_is_idempotent(sample_catalog):
    bookings = [car_booking(), bus_booking("3 Adults")]
    overrides = ManualOverrideStore({10: ManualOverride(booked=2)})

    for resource_type in (ResourceType.TOUR, ResourceType.CAR, ResourceType.BUS):
        first = resolve_slot(resource_type, None, DAY, sample_catalog, overrides, bookings)
        second = resolve_slot(resource_type, None, DAY, sample_catalog, overrides, bookings)
        assert first == second

    assert len(overrides) == 1


def test_resolve_does_not_create_override_rows(sample_catalog):
    overrides = ManualOverrideStore()

    resolve_month(ResourceType.TOUR, None, 2026, 11, sample_catalog, overrides, [])

    assert len(overrides) == 0


class TestSlotStatus:
    """Test display status derivation."""

    @pytest.mark.parametrize(
        "booked,blocked,expected",
        [
            (0, True, SlotStatus.BLOCKED),
            (20, True, SlotStatus.BLOCKED),
            (20, False, SlotStatus.FULL),
            (25, False, SlotStatus.FULL),
            (15, False, SlotStatus.FILLING),
            (14, False, SlotStatus.AVAILABLE),
            (0, False, SlotStatus.AVAILABLE),
        ],
    )
    def test_thresholds(self, booked, blocked, expected):
        slot = Slot(date=DAY, capacity=20, booked=booked, price=0, blocked=blocked)

        assert slot_status(slot) == expected

    def test_zero_capacity_is_full(self):
        assert slot_status(Slot(date=DAY, capacity=0, booked=0, price=0)) == SlotStatus.FULL

    def test_custom_threshold(self):
        slot = Slot(date=DAY, capacity=10, booked=5, price=0)

        assert slot_status(slot, filling_threshold=0.5) == SlotStatus.FILLING

    def test_utilization(self):
        assert utilization(Slot(date=DAY, capacity=20, booked=5, price=0)) == 0.25
        assert utilization(Slot(date=DAY, capacity=0, booked=3, price=0)) == 0.0


def test_resolve_month_covers_every_day(sample_catalog):
    slots = resolve_month(ResourceType.BUS, None, 2028, 2, sample_catalog, {}, [bus_booking("3")])

    assert [slot.date.day for slot in slots] == list(range(1, 30))
    assert all(slot.date.month == 2 for slot in slots)


def test_export_month_csv(sample_catalog):
    overrides = ManualOverrideStore({
        1: ManualOverride(blocked=True),
        2: ManualOverride(capacity=2, booked=2),
        3: ManualOverride(capacity=4, booked=3),
    })

    content = export_month_csv(ResourceType.TOUR, "PKG-001", 2026, 11, sample_catalog, overrides, [], DEFAULT_OVERRIDE)
    rows = list(csv.reader(io.StringIO(content)))

    assert rows[0] == ["Date", "Type", "Item", "Capacity", "Booked", "Price", "Status"]
    assert len(rows) == 31
    assert rows[1] == ["2026-11-01", "Tour", "Romantic Udaipur Getaway", "20", "0", "35000", "Blocked"]
    assert rows[2][-1] == "Sold Out"
    assert rows[3][-1] == "Available"
    assert rows[4][-1] == "Available"
