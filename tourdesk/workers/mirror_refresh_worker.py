"""Background worker that reseeds the in-memory mirrors from the database."""

import logging
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import async_session_factory
from ..services.ledger import Ledger
from ..services.repositories import SqlBookingRepository, SqlMasterDataRepository, SqlOverrideRepository
from .base import BaseWorker

logger = logging.getLogger(__name__)


async def refresh_ledger(ledger: Ledger, session_factory: Callable[[], AsyncSession] = async_session_factory) -> None:
    """Reload bookings, overrides and the catalog into `ledger`."""
    async with session_factory() as db:
        await ledger.refresh(
            SqlBookingRepository(db),
            SqlOverrideRepository(db),
            SqlMasterDataRepository(db),
        )


class MirrorRefreshWorker(BaseWorker):
    """
    Periodically replaces the mirrored bookings, overrides and catalog with
    what the durable store holds.

    Picks up rows written by other processes. Bookings and Tour days whose
    local mutation is still awaiting its durable write are left as they are
    locally, so a refresh never drops a pending counter change.
    """

    def __init__(
        self,
        ledger: Ledger,
        interval_seconds: float = 300,
        session_factory: Callable[[], AsyncSession] = async_session_factory,
    ):
        super().__init__(name="MirrorRefresh", interval_seconds=interval_seconds)
        self.ledger = ledger
        self.session_factory = session_factory

    async def process(self) -> None:
        await refresh_ledger(self.ledger, self.session_factory)
