"""Booking-related Pydantic schemas."""

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class ResourceType(str, Enum):
    """Bookable resource classes."""
    TOUR = "Tour"
    HOTEL = "Hotel"
    CAR = "Car"
    BUS = "Bus"


class BookingStatus(str, Enum):
    """Booking status enumeration."""
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Booking(BaseModel):
    """
    A booking as held by the local mirror and the durable store.

    ``date`` is kept as the ISO string the caller supplied; a malformed value
    simply never matches a calendar cell.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    id: str = Field(default_factory=lambda: uuid4().hex, description="Opaque unique booking ID")
    type: ResourceType = Field(..., description="Resource class")
    date: str = Field(..., description="Service date (YYYY-MM-DD)")
    status: BookingStatus = Field(BookingStatus.PENDING, description="Booking status")
    package_id: str | None = Field(None, description="Tour package ID for Tour bookings")
    title: str = Field("", description="Free-text title; vehicle names are matched against it")
    details: str | None = Field(None, description="Free-text details; vehicle names are matched against it")
    guests: str | None = Field(None, description="Free-form headcount, e.g. '2 Adults, 1 Child'")
    customer: str = Field("", description="Customer display name")
    email: str | None = Field(None, description="Customer email")
    amount: int = Field(0, ge=0, description="Booking amount in minor units")

    def is_active(self) -> bool:
        """Return True unless the booking is cancelled."""
        return self.status != BookingStatus.CANCELLED

    def mentions(self, text: str) -> bool:
        """Return True if ``text`` appears in the title or details."""
        return text in self.title or bool(self.details and text in self.details)


class CreateBookingRequest(BaseModel):
    """Request schema for creating a booking."""

    id: str | None = Field(None, description="Caller-supplied booking ID")
    type: ResourceType = Field(..., description="Resource class")
    date: str = Field(..., description="Service date (YYYY-MM-DD)")
    status: BookingStatus = Field(BookingStatus.PENDING, description="Initial status")
    package_id: str | None = Field(None, description="Tour package ID")
    title: str = Field("", max_length=500, description="Booking title")
    details: str | None = Field(None, max_length=2000, description="Booking details")
    guests: str | None = Field(None, max_length=255, description="Free-form headcount")
    customer: str = Field("", max_length=255, description="Customer display name")
    email: str | None = Field(None, max_length=255, description="Customer email")
    amount: int = Field(0, ge=0, description="Booking amount in minor units")

    def to_booking(self) -> Booking:
        """Build the booking this request describes."""
        data = self.model_dump(exclude_none=True)
        return Booking(**data)


class CreateBookingResponse(BaseModel):
    """Response schema for a committed booking."""

    booking: Booking = Field(..., description="The committed booking")
    failed_side_effects: list[str] = Field(
        default_factory=list,
        description="Best-effort writes that failed and were tolerated"
    )


class UpdateBookingStatusRequest(BaseModel):
    """Request schema for an out-of-band status edit."""

    booking_id: str = Field(..., description="Booking to update")
    status: BookingStatus = Field(..., description="New status")


class ListBookingsRequest(BaseModel):
    """Request schema for listing mirrored bookings."""

    type: ResourceType | None = Field(None, description="Filter by resource class")
    date: str | None = Field(None, description="Filter by service date")
    include_cancelled: bool = Field(True, description="Include cancelled bookings")


class ListBookingsResponse(BaseModel):
    """Response schema for listing bookings."""

    items: list[Booking] = Field(..., description="Matching bookings")
