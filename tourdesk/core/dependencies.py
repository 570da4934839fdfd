"""FastAPI dependencies wiring the ledger and durable stores into requests."""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..services.booking_service import BookingService
from ..services.ledger import Ledger
from ..services.reconciliation_service import ReconciliationEngine
from ..services.repositories import SqlBookingRepository, SqlMasterDataRepository, SqlOverrideRepository
from .config import settings
from .database import get_async_session


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Database dependency that provides async database sessions.

    Yields:
        AsyncSession: Database session
    """
    async for session in get_async_session():
        yield session


def get_ledger(request: Request) -> Ledger:
    """Return the ledger held by the running application."""
    return request.app.state.ledger


def get_reconciliation_engine(
    ledger: Ledger = Depends(get_ledger),
    db: AsyncSession = Depends(get_db),
) -> ReconciliationEngine:
    """Build a reconciliation engine bound to this request's session."""
    return ReconciliationEngine(
        bookings=ledger.bookings,
        overrides=ledger.overrides,
        catalog=ledger.catalog,
        booking_writer=SqlBookingRepository(db),
        override_writer=SqlOverrideRepository(db),
        master_data=SqlMasterDataRepository(db),
        write_timeout=settings.durable_write_timeout_seconds,
        filling_threshold=settings.filling_threshold,
    )


def get_booking_service(
    ledger: Ledger = Depends(get_ledger),
    db: AsyncSession = Depends(get_db),
) -> BookingService:
    """Build a booking service bound to this request's session."""
    return BookingService(ledger.bookings, SqlBookingRepository(db))


LedgerDep = Depends(get_ledger)
DatabaseSession = Depends(get_db)
EngineDep = Depends(get_reconciliation_engine)
BookingServiceDep = Depends(get_booking_service)
