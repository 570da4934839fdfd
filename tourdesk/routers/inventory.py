"""Inventory router for availability and manual override operations."""

import logging

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from ..core.config import settings
from ..core.dependencies import EngineDep, LedgerDep
from ..core.observability import metrics_collector
from ..schemas.inventory import (
    CalendarRequest,
    CalendarResponse,
    SlotRequest,
    SlotResponse,
    UpdateOverrideRequest,
)
from ..services.availability_service import (
    export_month_csv,
    resolve_month,
    resolve_slot,
    slot_status,
    utilization,
)
from ..services.ledger import Ledger
from ..services.reconciliation_service import ReconciliationEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/inventory", tags=["inventory"])


@router.post("/slot", response_model=SlotResponse)
async def get_slot(request: SlotRequest, ledger: Ledger = LedgerDep) -> JSONResponse:
    """Resolve the availability of one resource on one date."""
    slot = resolve_slot(
        request.resource_type,
        request.resource_ref,
        request.date,
        ledger.catalog,
        ledger.overrides,
        ledger.bookings,
        ledger.overrides.default,
    )
    metrics_collector.set_slot_utilization(request.resource_type.value, utilization(slot))

    response_data = SlotResponse(slot=slot, status=slot_status(slot, settings.filling_threshold))
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json")
    )


@router.post("/calendar", response_model=CalendarResponse)
async def get_calendar(request: CalendarRequest, ledger: Ledger = LedgerDep) -> JSONResponse:
    """Resolve every day of a month for one resource."""
    slots = resolve_month(
        request.resource_type,
        request.resource_ref,
        request.year,
        request.month,
        ledger.catalog,
        ledger.overrides,
        ledger.bookings,
        ledger.overrides.default,
    )
    response_data = CalendarResponse(
        resource_type=request.resource_type,
        year=request.year,
        month=request.month,
        days=[SlotResponse(slot=slot, status=slot_status(slot, settings.filling_threshold)) for slot in slots],
    )
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json")
    )


@router.post("/export", response_class=Response)
async def export_calendar(request: CalendarRequest, ledger: Ledger = LedgerDep) -> Response:
    """Export a month of availability as CSV."""
    content = export_month_csv(
        request.resource_type,
        request.resource_ref,
        request.year,
        request.month,
        ledger.catalog,
        ledger.overrides,
        ledger.bookings,
        ledger.overrides.default,
    )
    filename = f"inventory_{request.resource_type.value}_{request.year}-{request.month:02d}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/override")
async def update_override(
    request: UpdateOverrideRequest,
    engine: ReconciliationEngine = EngineDep,
) -> JSONResponse:
    """
    Set a Tour day's capacity, price or blocked flag.

    Car and Bus availability is derived from bookings and the fleet, so there
    is nothing to override for them.
    """
    override = await engine.update_manual_override(request.date, request.patch)

    logger.info(
        "Manual override applied",
        extra={
            "date": request.date.isoformat(),
            "patch": request.patch.model_dump(exclude_none=True),
        }
    )

    return JSONResponse(
        status_code=200,
        content={"date": request.date.isoformat(), **override.model_dump(mode="json")}
    )
