"""Contracts of the external collaborators the reconciliation core talks to."""

from datetime import date
from typing import Protocol

from ..schemas.booking import Booking, BookingStatus
from ..schemas.catalog import BusAsset, FleetVehicle, TourPackage
from ..schemas.inventory import ManualOverride


class MasterDataProvider(Protocol):
    """Source of the static resource catalog."""

    async def list_tour_packages(self) -> list[TourPackage]: ...

    async def list_fleet_vehicles(self) -> list[FleetVehicle]: ...

    async def list_bus_assets(self) -> list[BusAsset]: ...

    async def update_remaining_seats(self, package_id: str, remaining_seats: int) -> None: ...


class DurableBookingStore(Protocol):
    """Durable booking persistence. Writes may fail at any time."""

    async def create_booking(self, booking: Booking) -> None: ...

    async def list_bookings(self) -> list[Booking]: ...

    async def update_booking_status(self, booking_id: str, status: BookingStatus) -> None: ...


class DurableOverrideStore(Protocol):
    """Durable per-date Tour override persistence."""

    async def get_override(self, day: date) -> ManualOverride | None: ...

    async def put_override(self, day: date, override: ManualOverride) -> None: ...

    async def list_overrides(self) -> dict[date, ManualOverride]: ...
