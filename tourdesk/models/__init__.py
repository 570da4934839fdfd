"""Models module exporting all database models."""

from .booking import BookingRecord
from .catalog import TourPackageRecord, TransportRecord
from .inventory import DailyInventory

__all__ = [
    # Booking entity
    "BookingRecord",

    # Inventory entity
    "DailyInventory",

    # Master data entities
    "TourPackageRecord",
    "TransportRecord",
]
