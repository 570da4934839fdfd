"""Background workers for the booking reconciliation service."""

from .base import BaseWorker
from .manager import WorkerManager
from .mirror_refresh_worker import MirrorRefreshWorker, refresh_ledger

__all__ = ["BaseWorker", "MirrorRefreshWorker", "WorkerManager", "refresh_ledger"]
