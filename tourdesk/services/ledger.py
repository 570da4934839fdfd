"""The shared reconciliation state: booking mirror, overrides and catalog."""

import logging
from dataclasses import dataclass, field

from ..schemas.inventory import ManualOverride
from .booking_store import BookingStore
from .catalog_service import ResourceCatalog
from .override_store import ManualOverrideStore
from .ports import DurableBookingStore, DurableOverrideStore, MasterDataProvider

logger = logging.getLogger(__name__)


@dataclass
class Ledger:
    """
    Explicit container for the mutable state shared by the resolver and the
    engine. One instance lives on the application; tests build their own.
    """

    bookings: BookingStore = field(default_factory=BookingStore)
    overrides: ManualOverrideStore = field(default_factory=ManualOverrideStore)
    catalog: ResourceCatalog = field(default_factory=ResourceCatalog)

    @classmethod
    def with_defaults(cls, capacity: int, price: int) -> "Ledger":
        """Build an empty ledger whose un-overridden Tour days use these defaults."""
        return cls(overrides=ManualOverrideStore(default=ManualOverride(capacity=capacity, price=price)))

    async def refresh(
        self,
        booking_source: DurableBookingStore,
        override_source: DurableOverrideStore,
        master_data: MasterDataProvider,
    ) -> None:
        """
        Reseed every mirror from the durable collaborators.

        Bookings and Tour days with a local change in flight when the refresh
        starts, or still in flight when it lands, keep their local state.
        """
        held_bookings = self.bookings.in_flight()
        held_days = self.overrides.in_flight()

        catalog = await ResourceCatalog.load(master_data)
        bookings = await booking_source.list_bookings()
        overrides = await override_source.list_overrides()

        self.catalog = catalog
        self.bookings.reset(bookings, keep=held_bookings)
        self.overrides.reset(overrides, keep=held_days)

        logger.info(
            "Ledger refreshed",
            extra={
                "bookings": len(self.bookings),
                "overrides": len(self.overrides),
            }
        )
