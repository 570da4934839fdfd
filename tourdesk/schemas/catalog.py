"""Resource catalog Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class TourPackage(BaseModel):
    """Tour package master data."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Package ID")
    title: str = Field("", description="Package title")
    capacity_default: int = Field(0, ge=0, description="Default capacity")
    price_default: int = Field(0, ge=0, description="Default price")
    remaining_seats: int | None = Field(None, ge=0, description="Advertised remaining seats, if tracked")


class FleetVehicle(BaseModel):
    """Individually named vehicle of the Car class."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Vehicle ID")
    name: str = Field(..., description="Vehicle name, matched against booking text")
    capacity: int = Field(..., ge=0, description="Vehicles available per day")
    base_rate: int = Field(..., ge=0, description="Daily rate")
    type: str = Field("Sedan", description="Vehicle type")


class BusAsset(BaseModel):
    """Seat-counted bus asset."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Bus ID")
    name: str = Field(..., description="Bus name")
    capacity: int = Field(..., ge=0, description="Seats per day")
    base_rate: int = Field(..., ge=0, description="Daily rate")
