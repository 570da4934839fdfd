"""Pydantic schemas for request/response validation."""

from .booking import (
    Booking,
    BookingStatus,
    CreateBookingRequest,
    CreateBookingResponse,
    ListBookingsRequest,
    ListBookingsResponse,
    ResourceType,
    UpdateBookingStatusRequest,
)
from .catalog import BusAsset, FleetVehicle, TourPackage
from .health import HealthResponse, HealthStatus
from .inventory import (
    DEFAULT_OVERRIDE,
    CalendarRequest,
    CalendarResponse,
    ManualOverride,
    OverridePatch,
    Slot,
    SlotRequest,
    SlotResponse,
    SlotStatus,
    UpdateOverrideRequest,
)

__all__ = [
    "DEFAULT_OVERRIDE",
    "Booking",
    "BookingStatus",
    "BusAsset",
    "CalendarRequest",
    "CalendarResponse",
    "CreateBookingRequest",
    "CreateBookingResponse",
    "FleetVehicle",
    "HealthResponse",
    "HealthStatus",
    "ListBookingsRequest",
    "ListBookingsResponse",
    "ManualOverride",
    "OverridePatch",
    "ResourceType",
    "Slot",
    "SlotRequest",
    "SlotResponse",
    "SlotStatus",
    "TourPackage",
    "UpdateBookingStatusRequest",
    "UpdateOverrideRequest",
]
