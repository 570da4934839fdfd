"""Availability resolution for tour days, fleet vehicles and buses."""

import csv
import io
import logging
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Optional

from ..schemas.booking import Booking, ResourceType
from ..schemas.inventory import DEFAULT_OVERRIDE, ManualOverride, Slot, SlotStatus
from .catalog_service import ResourceCatalog
from .parsing import days_in_month, parse_guest_count

logger = logging.getLogger(__name__)

DEFAULT_FILLING_THRESHOLD = 0.75

_EXPORT_LABELS = {
    SlotStatus.BLOCKED: "Blocked",
    SlotStatus.FULL: "Sold Out",
    SlotStatus.FILLING: "Available",
    SlotStatus.AVAILABLE: "Available",
}


def _active_on(bookings: Iterable[Booking], resource_type: ResourceType, day: date) -> list[Booking]:
    """Non-cancelled bookings of ``resource_type`` on ``day``."""
    day_str = day.isoformat()
    return [
        b for b in bookings
        if b.type == resource_type and b.date == day_str and b.is_active()
    ]


def resolve_slot(
    resource_type: ResourceType,
    resource_ref: Optional[str],
    day: date,
    catalog: ResourceCatalog,
    overrides: Mapping[int, ManualOverride],
    bookings: Iterable[Booking],
    default_override: ManualOverride = DEFAULT_OVERRIDE,
) -> Slot:
    """
    Resolve the availability of one resource on one date.

    Pure: reads its arguments and nothing else, so it can run once per
    calendar cell per render.

    - Tour: everything, including ``booked``, comes from the manual override
      for the day of month. Bookings are not replayed; the stored counter is
      owned by the reconciliation engine.
    - Car: capacity and price of the selected vehicle; each active Car booking
      on the date whose title or details mention the vehicle name counts 1.
    - Bus: capacity and price of the selected bus; active Bus bookings on the
      date count their parsed guest headcount, all buses sharing one pool.

    Car and Bus resolve to an empty zero slot when the catalog has no asset
    of that class. Hotel bookings never take part in capacity accounting.
    """
    if resource_type == ResourceType.TOUR:
        override = overrides.get(day.day, default_override)
        return Slot(
            date=day,
            capacity=override.capacity,
            booked=override.booked,
            price=override.price,
            blocked=override.blocked,
        )

    if resource_type == ResourceType.CAR:
        vehicle = catalog.select_vehicle(resource_ref)
        if vehicle is None:
            return _empty_slot(day)
        booked = sum(
            1 for b in _active_on(bookings, ResourceType.CAR, day)
            if b.mentions(vehicle.name)
        )
        return Slot(date=day, capacity=vehicle.capacity, booked=booked, price=vehicle.base_rate)

    if resource_type == ResourceType.BUS:
        bus = catalog.select_bus(resource_ref)
        if bus is None:
            return _empty_slot(day)
        booked = sum(
            parse_guest_count(b.guests)
            for b in _active_on(bookings, ResourceType.BUS, day)
        )
        return Slot(date=day, capacity=bus.capacity, booked=booked, price=bus.base_rate)

    return _empty_slot(day)


def _empty_slot(day: date) -> Slot:
    return Slot(date=day, capacity=0, booked=0, price=0, blocked=False)


def slot_status(slot: Slot, filling_threshold: float = DEFAULT_FILLING_THRESHOLD) -> SlotStatus:
    """Display status of a slot."""
    if slot.blocked:
        return SlotStatus.BLOCKED
    if slot.booked >= slot.capacity:
        return SlotStatus.FULL
    if slot.booked >= slot.capacity * filling_threshold:
        return SlotStatus.FILLING
    return SlotStatus.AVAILABLE


def utilization(slot: Slot) -> float:
    """Booked over capacity, 0 for a zero-capacity slot."""
    if slot.capacity <= 0:
        return 0.0
    return slot.booked / slot.capacity


def resolve_month(
    resource_type: ResourceType,
    resource_ref: Optional[str],
    year: int,
    month: int,
    catalog: ResourceCatalog,
    overrides: Mapping[int, ManualOverride],
    bookings: Iterable[Booking],
    default_override: ManualOverride = DEFAULT_OVERRIDE,
) -> list[Slot]:
    """Resolve every day of a month, in calendar order."""
    snapshot = tuple(bookings)
    return [
        resolve_slot(
            resource_type,
            resource_ref,
            date(year, month, day),
            catalog,
            overrides,
            snapshot,
            default_override,
        )
        for day in range(1, days_in_month(year, month) + 1)
    ]


def resource_label(resource_type: ResourceType, resource_ref: Optional[str], catalog: ResourceCatalog) -> str:
    """Human-readable name of the resolved resource."""
    if resource_type == ResourceType.TOUR:
        package = catalog.find_package(resource_ref)
        return package.title if package and package.title else (resource_ref or "")
    if resource_type == ResourceType.CAR:
        vehicle = catalog.select_vehicle(resource_ref)
        return vehicle.name if vehicle else (resource_ref or "")
    if resource_type == ResourceType.BUS:
        bus = catalog.select_bus(resource_ref)
        return bus.name if bus else (resource_ref or "")
    return resource_ref or ""


def export_month_csv(
    resource_type: ResourceType,
    resource_ref: Optional[str],
    year: int,
    month: int,
    catalog: ResourceCatalog,
    overrides: Mapping[int, ManualOverride],
    bookings: Iterable[Booking],
    default_override: ManualOverride = DEFAULT_OVERRIDE,
) -> str:
    """Render a month of slots as CSV for the back-office export."""
    slots = resolve_month(
        resource_type, resource_ref, year, month, catalog, overrides, bookings, default_override
    )
    item = resource_label(resource_type, resource_ref, catalog)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["Date", "Type", "Item", "Capacity", "Booked", "Price", "Status"])
    for slot in slots:
        writer.writerow([
            slot.date.isoformat(),
            resource_type.value,
            item,
            slot.capacity,
            slot.booked,
            slot.price,
            _EXPORT_LABELS[slot_status(slot)],
        ])

    logger.debug(
        "Inventory month exported",
        extra={"resource_type": resource_type.value, "year": year, "month": month, "rows": len(slots)}
    )
    return buffer.getvalue()
