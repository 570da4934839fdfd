"""Booking service for edits made outside the reconciliation engine."""

import logging

from ..core.exceptions import NotFoundError
from ..schemas.booking import Booking, BookingStatus, ListBookingsRequest
from .booking_store import BookingStore
from .ports import DurableBookingStore

logger = logging.getLogger(__name__)


class BookingService:
    """
    Out-of-band booking operations used by the bookings list.

    Status edits go to the durable store first and are then mirrored. They do
    not touch the Tour booked counter: cancelling a Tour booking leaves the
    stored counter as it is, while Car and Bus availability drop on the next
    read because they are replayed from the mirror.
    """

    def __init__(self, bookings: BookingStore, booking_writer: DurableBookingStore):
        self.bookings = bookings
        self.booking_writer = booking_writer

    def list_bookings(self, request: ListBookingsRequest) -> list[Booking]:
        """List mirrored bookings matching the request filters."""
        items = []
        for booking in self.bookings:
            if request.type is not None and booking.type != request.type:
                continue
            if request.date is not None and booking.date != request.date:
                continue
            if not request.include_cancelled and not booking.is_active():
                continue
            items.append(booking)
        return items

    async def update_booking_status(self, booking_id: str, status: BookingStatus) -> Booking:
        """
        Change a booking's status durably, then in the mirror.

        Raises:
            NotFoundError: If the booking is not mirrored
            PersistenceError: If the durable update fails
        """
        booking = self.bookings.get(booking_id)
        if booking is None:
            logger.warning(
                "Booking not found for status update",
                extra={"booking_id": booking_id}
            )
            raise NotFoundError(resource_type="booking", resource_id=booking_id)

        await self.booking_writer.update_booking_status(booking_id, status)
        updated = self.bookings.update_status(booking_id, status) or booking.model_copy(update={"status": status})

        logger.info(
            "Booking status updated",
            extra={
                "booking_id": booking_id,
                "previous_status": booking.status.value,
                "status": status.value,
                "type": booking.type.value,
            }
        )
        return updated
