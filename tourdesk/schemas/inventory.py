"""Inventory-related Pydantic schemas."""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .booking import ResourceType

DEFAULT_SLOT_CAPACITY = 20
DEFAULT_SLOT_PRICE = 35000


class ManualOverride(BaseModel):
    """Admin-settable Tour day settings plus the stored booked counter."""

    model_config = ConfigDict(frozen=True)

    capacity: int = Field(DEFAULT_SLOT_CAPACITY, ge=0, description="Seats offered on the day")
    price: int = Field(DEFAULT_SLOT_PRICE, ge=0, description="Price for the day")
    blocked: bool = Field(False, description="Whether the day is closed for sale")
    booked: int = Field(0, ge=0, description="Stored booked counter")

    def incremented(self, by: int = 1) -> "ManualOverride":
        """Return a copy with the booked counter raised by ``by``."""
        return self.model_copy(update={"booked": self.booked + by})


DEFAULT_OVERRIDE = ManualOverride()


class OverridePatch(BaseModel):
    """Partial administrative update of a manual override."""

    capacity: int | None = Field(None, ge=0, description="New capacity")
    price: int | None = Field(None, ge=0, description="New price")
    blocked: bool | None = Field(None, description="New blocked flag")

    def apply_to(self, override: ManualOverride) -> ManualOverride:
        """
        Return ``override`` with the supplied fields replaced.

        Blocking a day clears its booked counter; any other patch keeps it.
        """
        update = self.model_dump(exclude_none=True)
        if self.blocked:
            update["booked"] = 0
        return override.model_copy(update=update)


class Slot(BaseModel):
    """Resolved availability of one resource on one date."""

    model_config = ConfigDict(frozen=True)

    date: dt.date = Field(..., description="Calendar date")
    capacity: int = Field(..., description="Units available for sale")
    booked: int = Field(..., description="Occupied units")
    price: int = Field(..., description="Price for the date")
    blocked: bool = Field(False, description="Whether the date is closed")


class SlotStatus(str, Enum):
    """Display status of a slot."""
    BLOCKED = "blocked"
    FULL = "full"
    FILLING = "filling"
    AVAILABLE = "available"


class SlotRequest(BaseModel):
    """Request schema for resolving one slot."""

    resource_type: ResourceType = Field(..., description="Resource class")
    resource_ref: str | None = Field(None, description="Package, vehicle or bus ID")
    date: dt.date = Field(..., description="Calendar date")


class SlotResponse(BaseModel):
    """Resolved slot with its display status."""

    slot: Slot
    status: SlotStatus


class CalendarRequest(BaseModel):
    """Request schema for a month of slots."""

    resource_type: ResourceType = Field(..., description="Resource class")
    resource_ref: str | None = Field(None, description="Package, vehicle or bus ID")
    year: int = Field(..., ge=1, le=9999, description="Calendar year")
    month: int = Field(..., ge=1, le=12, description="Calendar month")


class CalendarResponse(BaseModel):
    """A month of resolved slots."""

    resource_type: ResourceType
    year: int
    month: int
    days: list[SlotResponse]


class UpdateOverrideRequest(BaseModel):
    """Request schema for an administrative override write."""

    date: dt.date = Field(..., description="Day to override")
    patch: OverridePatch = Field(..., description="Fields to overwrite")
