"""FastAPI application initialization and configuration."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .core.config import settings
from .core.database import close_db, init_db
from .core.exceptions import (
    ProblemDetailsException,
    generic_exception_handler,
    problem_details_handler,
)
from .core.middleware import setup_middleware
from .core.observability import (
    instrument_fastapi,
    instrument_sqlalchemy,
    setup_structured_logging,
    setup_tracing,
)
from .routers import booking_router, health_router, inventory_router, metrics_router
from .services.ledger import Ledger
from .workers.manager import WorkerManager
from .workers.mirror_refresh_worker import refresh_ledger

SERVICE_NAME = "tourdesk-api"
SERVICE_VERSION = __version__

# Configure structured logging
setup_structured_logging()

# Configure traditional logging for compatibility
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Creates tables, seeds the ledger from the database and starts the
    mirror refresh worker. Shuts them down in reverse order.
    """
    logger.info("Starting FastAPI application")
    logger.info(f"Environment: {settings.environment}")

    ledger: Ledger = app.state.ledger
    workers = WorkerManager.for_ledger(ledger, settings)
    app.state.workers = workers

    try:
        setup_tracing(SERVICE_NAME, SERVICE_VERSION)
        instrument_sqlalchemy()

        await init_db()
        await refresh_ledger(ledger)
        logger.info(
            "Ledger seeded",
            extra={"bookings": len(ledger.bookings), "overrides": len(ledger.overrides)}
        )

        await workers.start_all()
    except Exception as e:
        logger.error(f"Failed to initialize application: {e}")
        raise

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down FastAPI application")
    await workers.stop_all()
    await close_db()
    logger.info("Application shutdown complete")


def create_app(ledger: Ledger | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        ledger: Shared reconciliation state. A fresh one using the configured
            slot defaults is created when omitted.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title="Tourdesk Booking API",
        description="RPC-over-HTTP API for tour, car and bus availability with optimistic booking reconciliation",
        version=SERVICE_VERSION,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.ledger = ledger if ledger is not None else Ledger.with_defaults(
        settings.default_slot_capacity,
        settings.default_slot_price,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "traceparent", "tracestate"],
    )

    setup_middleware(app, enable_logging=True)
    instrument_fastapi(app)

    app.add_exception_handler(ProblemDetailsException, problem_details_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get(
        "/health",
        status_code=status.HTTP_200_OK,
        tags=["Health"],
        summary="Health Check",
        response_model=dict,
    )
    async def health_check():
        """Liveness probe."""
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "environment": settings.environment,
        }

    @app.get(
        "/ready",
        status_code=status.HTTP_200_OK,
        tags=["Health"],
        summary="Readiness Check",
        response_model=dict,
    )
    async def readiness_check():
        """Report what the in-memory mirrors currently hold."""
        ledger: Ledger = app.state.ledger
        workers: WorkerManager | None = getattr(app.state, "workers", None)
        return {
            "status": "ready",
            "service": SERVICE_NAME,
            "checks": {
                "bookings_mirrored": len(ledger.bookings),
                "overrides_mirrored": len(ledger.overrides),
                "workers": workers.get_worker_status() if workers else {},
            },
        }

    @app.get(
        "/info",
        status_code=status.HTTP_200_OK,
        tags=["Info"],
        summary="Service Information",
        response_model=dict,
    )
    async def service_info():
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "description": "Capacity and booking reconciliation for tours, cars and buses",
            "environment": settings.environment,
            "features": {
                "optimistic_booking": True,
                "manual_overrides": True,
                "csv_export": True,
                "tracing": settings.otlp_endpoint is not None,
                "problem_details": True,
            },
            "endpoints": {
                "health": "/health",
                "readiness": "/ready",
                "info": "/info",
                "metrics": "/metrics",
                "docs": "/docs" if settings.debug else None,
            },
        }

    app.include_router(health_router)
    app.include_router(booking_router)
    app.include_router(inventory_router)
    app.include_router(metrics_router)

    logger.info("FastAPI application created and configured")

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tourdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
