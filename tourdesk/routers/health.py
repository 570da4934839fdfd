"""RPC-style health ping."""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.dependencies import LedgerDep
from ..schemas.health import HealthResponse, HealthStatus
from ..services.ledger import Ledger

router = APIRouter(prefix="/v1/health", tags=["health"])


@router.post("/ping", response_model=HealthResponse)
async def health_ping(ledger: Ledger = LedgerDep) -> JSONResponse:
    """Return service status, server time and how much the mirrors hold."""
    response_data = HealthResponse(
        status=HealthStatus.HEALTHY,
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        bookings_mirrored=len(ledger.bookings),
        overrides_mirrored=len(ledger.overrides),
    )
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json"))
