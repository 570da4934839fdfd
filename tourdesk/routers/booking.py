"""Booking router for reservation and status operations."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..core.dependencies import BookingServiceDep, EngineDep
from ..schemas.booking import (
    CreateBookingRequest,
    CreateBookingResponse,
    ListBookingsRequest,
    ListBookingsResponse,
    UpdateBookingStatusRequest,
)
from ..services.booking_service import BookingService
from ..services.reconciliation_service import ReconciliationEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/booking", tags=["booking"])


@router.post("/create", response_model=CreateBookingResponse)
async def create_booking(
    request: CreateBookingRequest,
    engine: ReconciliationEngine = EngineDep,
) -> JSONResponse:
    """
    Create a booking.

    The booking is visible in availability immediately. If it cannot be
    stored, it is withdrawn again and a retryable 503 problem is returned.
    Capacity is not enforced; overbooked days show as full.
    """
    booking = request.to_booking()
    result = await engine.create_booking(booking)

    if not result.committed:
        logger.warning(
            "Booking creation rolled back",
            extra={
                "booking_id": booking.id,
                "type": booking.type.value,
                "reason": result.reason,
            }
        )
        raise result.error

    response_data = CreateBookingResponse(
        booking=result.booking,
        failed_side_effects=[stage.value for stage in result.failed_side_effects],
    )
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json")
    )


@router.post("/list", response_model=ListBookingsResponse)
async def list_bookings(
    request: ListBookingsRequest,
    service: BookingService = BookingServiceDep,
) -> JSONResponse:
    """List mirrored bookings, newest first."""
    response_data = ListBookingsResponse(items=service.list_bookings(request))
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json")
    )


@router.post("/status")
async def update_booking_status(
    request: UpdateBookingStatusRequest,
    service: BookingService = BookingServiceDep,
) -> JSONResponse:
    """
    Change a booking's status.

    Cancelling frees Car and Bus capacity on the next availability read.
    The stored Tour booked counter is not decremented.
    """
    booking = await service.update_booking_status(request.booking_id, request.status)
    return JSONResponse(
        status_code=200,
        content=booking.model_dump(mode="json")
    )
