"""Local mirror of all bookings."""

import logging
from collections.abc import Iterable, Iterator
from typing import Optional

from ..schemas.booking import Booking, BookingStatus

logger = logging.getLogger(__name__)


class BookingStore:
    """
    In-process mirror of the durable booking store.

    Newest bookings come first. Iteration works on a snapshot, so a reader
    never observes a half-applied mutation.
    """

    def __init__(self, bookings: Iterable[Booking] = ()):
        self._bookings: list[Booking] = list(bookings)
        self._in_flight: set[str] = set()

    def __iter__(self) -> Iterator[Booking]:
        return iter(tuple(self._bookings))

    def __len__(self) -> int:
        return len(self._bookings)

    def __contains__(self, booking_id: object) -> bool:
        return any(b.id == booking_id for b in self._bookings)

    def get(self, booking_id: str) -> Optional[Booking]:
        """Get a booking by ID."""
        for booking in self._bookings:
            if booking.id == booking_id:
                return booking
        return None

    def snapshot(self) -> list[Booking]:
        """Return all bookings, newest first."""
        return list(self._bookings)

    def append(self, booking: Booking) -> None:
        """Add a booking at the head of the mirror."""
        self._bookings.insert(0, booking)

    def remove(self, booking_id: str) -> Optional[Booking]:
        """Remove a booking, returning it if it was present."""
        for index, booking in enumerate(self._bookings):
            if booking.id == booking_id:
                return self._bookings.pop(index)
        return None

    def replace(self, booking: Booking) -> bool:
        """Overwrite a mirrored booking with an edited copy."""
        for index, existing in enumerate(self._bookings):
            if existing.id == booking.id:
                self._bookings[index] = booking
                return True
        return False

    def update_status(self, booking_id: str, status: BookingStatus) -> Optional[Booking]:
        """Change the status of a mirrored booking."""
        booking = self.get(booking_id)
        if booking is None:
            return None
        updated = booking.model_copy(update={"status": status})
        self.replace(updated)
        return updated

    def hold(self, booking_id: str) -> None:
        """Mark a mirrored booking as awaiting its durable write."""
        self._in_flight.add(booking_id)

    def release(self, booking_id: str) -> None:
        self._in_flight.discard(booking_id)

    def in_flight(self) -> frozenset[str]:
        """IDs of bookings not yet confirmed durably."""
        return frozenset(self._in_flight)

    def reset(self, bookings: Iterable[Booking], keep: Iterable[str] = ()) -> None:
        """
        Replace the whole mirror with a fresh read of the durable store.

        Local bookings still in flight, or listed in ``keep``, that the read
        does not contain are carried over at the head.
        """
        fresh = list(bookings)
        fresh_ids = {b.id for b in fresh}
        carry_ids = self.in_flight().union(keep)
        carried = [b for b in self._bookings if b.id in carry_ids and b.id not in fresh_ids]
        self._bookings = carried + fresh
        logger.debug(
            "Booking mirror reset",
            extra={"bookings": len(self._bookings), "carried": len(carried)}
        )
