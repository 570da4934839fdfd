"""Worker manager for coordinating background tasks."""

import asyncio
import logging
from typing import Dict

from ..core.config import Settings
from ..services.ledger import Ledger
from .base import BaseWorker
from .mirror_refresh_worker import MirrorRefreshWorker

logger = logging.getLogger(__name__)


class WorkerManager:
    """
    Manages background workers for the application.

    Workers are registered by name and started and stopped together.
    """

    def __init__(self):
        self.workers: Dict[str, BaseWorker] = {}

    @classmethod
    def for_ledger(cls, ledger: Ledger, settings: Settings) -> "WorkerManager":
        """Build the worker set configured for this deployment."""
        manager = cls()
        if settings.enable_mirror_refresh:
            manager.register(
                "mirror_refresh",
                MirrorRefreshWorker(ledger, interval_seconds=settings.mirror_refresh_interval_seconds),
            )
        logger.info(f"Initialized {len(manager.workers)} workers")
        return manager

    def register(self, name: str, worker: BaseWorker) -> None:
        self.workers[name] = worker

    async def start_all(self) -> None:
        """Start all workers."""
        for name, worker in self.workers.items():
            await worker.start()
            logger.info(f"Started worker: {name}")

    async def stop_all(self) -> None:
        """Stop all workers, logging any that fail to stop cleanly."""
        results = await asyncio.gather(
            *(worker.stop() for worker in self.workers.values()),
            return_exceptions=True,
        )
        for name, result in zip(self.workers, results):
            if isinstance(result, Exception):
                logger.error(f"Error stopping worker {name}: {result!s}")

        logger.info("All workers stopped")

    def get_worker(self, name: str) -> BaseWorker:
        """
        Get a specific worker by name.

        Raises:
            KeyError: If worker not found
        """
        return self.workers[name]

    def get_worker_status(self) -> Dict[str, bool]:
        """Map worker names to their running state."""
        return {name: worker.running for name, worker in self.workers.items()}
