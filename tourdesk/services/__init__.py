"""Service layer package."""

from .availability_service import export_month_csv, resolve_month, resolve_slot, slot_status
from .booking_service import BookingService
from .booking_store import BookingStore
from .catalog_service import ResourceCatalog
from .ledger import Ledger
from .override_store import ManualOverrideStore
from .parsing import days_in_month, parse_guest_count
from .reconciliation_service import (
    CompensationPolicy,
    ReconciliationEngine,
    ReconciliationOutcome,
    ReconciliationResult,
    WriteStage,
)

__all__ = [
    "BookingService",
    "BookingStore",
    "CompensationPolicy",
    "Ledger",
    "ManualOverrideStore",
    "ReconciliationEngine",
    "ReconciliationOutcome",
    "ReconciliationResult",
    "ResourceCatalog",
    "WriteStage",
    "days_in_month",
    "export_month_csv",
    "parse_guest_count",
    "resolve_month",
    "resolve_slot",
    "slot_status",
]
