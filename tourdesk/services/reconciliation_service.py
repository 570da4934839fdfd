"""Booking reconciliation: optimistic creation with compensating rollback."""

import asyncio
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Awaitable, Optional

from ..core.exceptions import PersistenceError
from ..core.observability import get_logger, metrics_collector
from ..schemas.booking import Booking, ResourceType
from ..schemas.catalog import TourPackage
from ..schemas.inventory import ManualOverride, OverridePatch, SlotStatus
from .availability_service import resolve_slot, slot_status
from .booking_store import BookingStore
from .catalog_service import ResourceCatalog
from .override_store import ManualOverrideStore
from .parsing import parse_booking_date, parse_guest_count
from .ports import DurableBookingStore, DurableOverrideStore, MasterDataProvider

logger = get_logger(__name__)


class WriteStage(str, Enum):
    """Durable writes performed while reconciling a booking."""
    PRIMARY = "primary"
    OVERRIDE_SYNC = "override_sync"
    REMAINING_SEATS_SYNC = "remaining_seats_sync"


@dataclass(frozen=True)
class CompensationPolicy:
    """
    Which failed writes undo the optimistic local mutation.

    The default rolls back only on the primary booking write: a lost booking
    is worse than a stale counter, so secondary failures are tolerated.
    """

    rollback_on: frozenset[WriteStage] = frozenset({WriteStage.PRIMARY})

    def should_rollback(self, stage: WriteStage) -> bool:
        return stage in self.rollback_on


DEFAULT_COMPENSATION_POLICY = CompensationPolicy()


@dataclass(frozen=True)
class CounterChange:
    """A change of the stored booked counter on one Tour day."""

    day: date
    delta: int


@dataclass(frozen=True)
class OptimisticMutation:
    """Local changes applied before the durable write is confirmed."""

    booking: Booking
    counter_change: Optional[CounterChange] = None


@dataclass(frozen=True)
class Compensation:
    """Local changes that undo an optimistic mutation."""

    remove_booking_id: str
    counter_change: Optional[CounterChange] = None


def plan_mutation(booking: Booking, today: Optional[date] = None) -> OptimisticMutation:
    """
    Describe the optimistic mutation for ``booking`` without applying it.

    Tour bookings raise the stored counter of their day by exactly 1,
    whatever the guest count. An unparseable date falls back to ``today``.
    """
    if booking.type != ResourceType.TOUR:
        return OptimisticMutation(booking=booking)

    day = parse_booking_date(booking.date) or today or date.today()
    return OptimisticMutation(booking=booking, counter_change=CounterChange(day=day, delta=1))


def invert(mutation: OptimisticMutation) -> Compensation:
    """Pure inverse of an optimistic mutation."""
    change = mutation.counter_change
    reverse = None
    if change is not None:
        reverse = CounterChange(day=change.day, delta=-change.delta)
    return Compensation(remove_booking_id=mutation.booking.id, counter_change=reverse)


def _apply_counter_change(change: CounterChange, overrides: ManualOverrideStore) -> None:
    current = overrides.read(change.day)
    overrides.write(change.day, current.model_copy(update={"booked": max(0, current.booked + change.delta)}))


def apply_mutation(mutation: OptimisticMutation, bookings: BookingStore, overrides: ManualOverrideStore) -> None:
    """Apply an optimistic mutation to the local mirror."""
    bookings.append(mutation.booking)
    if mutation.counter_change is not None:
        _apply_counter_change(mutation.counter_change, overrides)


def apply_compensation(compensation: Compensation, bookings: BookingStore, overrides: ManualOverrideStore) -> None:
    """
    Undo an optimistic mutation on the local mirror.

    The counter is moved back by its delta rather than restored from a
    snapshot, so increments made meanwhile by other creations survive.
    """
    bookings.remove(compensation.remove_booking_id)
    if compensation.counter_change is not None:
        _apply_counter_change(compensation.counter_change, overrides)


class ReconciliationOutcome(str, Enum):
    """Tag of a reconciliation result."""
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass
class ReconciliationResult:
    """Outcome of ``create_booking``: Committed, or RolledBack with a reason."""

    outcome: ReconciliationOutcome
    booking: Booking
    mutation: OptimisticMutation
    compensation: Optional[Compensation] = None
    error: Optional[PersistenceError] = None
    failed_side_effects: list[WriteStage] = field(default_factory=list)

    @property
    def committed(self) -> bool:
        return self.outcome == ReconciliationOutcome.COMMITTED

    @property
    def reason(self) -> Optional[str]:
        return str(self.error) if self.error else None


class ReconciliationEngine:
    """
    Turns reservation requests into durable bookings.

    The engine is the only writer for booking creation. It holds no locks and
    attaches no idempotency key: concurrent creations on one event loop add
    up because each local increment happens before the first await, and a
    retried creation after a timeout may produce a duplicate.
    """

    def __init__(
        self,
        bookings: BookingStore,
        overrides: ManualOverrideStore,
        catalog: ResourceCatalog,
        booking_writer: DurableBookingStore,
        override_writer: DurableOverrideStore,
        master_data: MasterDataProvider,
        policy: CompensationPolicy = DEFAULT_COMPENSATION_POLICY,
        write_timeout: Optional[float] = None,
        filling_threshold: float = 0.75,
    ):
        self.bookings = bookings
        self.overrides = overrides
        self.catalog = catalog
        self.booking_writer = booking_writer
        self.override_writer = override_writer
        self.master_data = master_data
        self.policy = policy
        self.write_timeout = write_timeout
        self.filling_threshold = filling_threshold

    async def _durable(self, call: Awaitable[None]) -> None:
        if self.write_timeout is None:
            await call
        else:
            await asyncio.wait_for(call, timeout=self.write_timeout)

    async def create_booking(self, booking: Booking) -> ReconciliationResult:
        """
        Create a booking with optimistic local mutation and rollback.

        The booking is appended locally (and a Tour day counter raised)
        before the durable write. If that write fails, the local mutation is
        undone and the result is RolledBack with a ``PersistenceError``.
        Override and remaining-seats syncs follow a committed write and are
        best effort. Capacity is never enforced.

        Once called, the coroutine must be awaited to completion; abandoning
        it would leave the local mirror diverged from the durable store.
        """
        log = logger.with_context(booking_id=booking.id, resource_type=booking.type.value)
        guest_count = parse_guest_count(booking.guests)

        mutation = plan_mutation(booking)
        self._warn_if_not_open(booking, log)
        apply_mutation(mutation, self.bookings, self.overrides)
        log.debug("Optimistic booking applied", guests=guest_count, date=booking.date)

        change = mutation.counter_change
        self.bookings.hold(booking.id)
        if change is not None:
            self.overrides.hold(change.day)
        try:
            return await self._reconcile(mutation, guest_count, log)
        finally:
            self.bookings.release(booking.id)
            if change is not None:
                self.overrides.release(change.day)

    async def _reconcile(self, mutation: OptimisticMutation, guest_count: int, log) -> ReconciliationResult:
        booking = mutation.booking
        result = ReconciliationResult(
            outcome=ReconciliationOutcome.COMMITTED,
            booking=booking,
            mutation=mutation,
        )

        try:
            await self._durable(self.booking_writer.create_booking(booking))
        except Exception as e:
            error = self._as_persistence_error(WriteStage.PRIMARY, booking.id, e)
            if self.policy.should_rollback(WriteStage.PRIMARY):
                return self._roll_back(result, error, log)
            log.error("Primary booking write failed, rollback disabled by policy", error=str(error))
            result.failed_side_effects.append(WriteStage.PRIMARY)
            return result

        metrics_collector.record_booking_committed(booking.type.value)
        log.info("Booking committed", date=booking.date, guests=guest_count)

        if mutation.counter_change is not None:
            change = mutation.counter_change
            await self._side_effect(
                result,
                WriteStage.OVERRIDE_SYNC,
                self.override_writer.put_override(change.day, self.overrides.peek(change.day)),
                log,
            )
            if not result.committed:
                return result

            package = self.catalog.find_package(booking.package_id)
            if package is not None and package.remaining_seats is not None:
                await self._sync_remaining_seats(result, package, guest_count, log)

        return result

    async def update_manual_override(self, day: date, patch: OverridePatch) -> ManualOverride:
        """
        Administrative write of a Tour day's capacity, price or blocked flag.

        Bypasses the booking-driven counter: ``booked`` is left as stored,
        except that blocking a day clears it. A failed durable write restores
        the previous settings and counter, keeping any increments made
        meanwhile, and raises ``PersistenceError``.
        """
        before = self.overrides.peek(day)
        updated = self.overrides.apply_patch(day, patch)
        self.overrides.hold(day)
        try:
            await self._durable(self.override_writer.put_override(day, updated))
        except Exception as e:
            current = self.overrides.read(day)
            meanwhile = current.booked - updated.booked
            self.overrides.write(day, before.model_copy(update={"booked": max(0, before.booked + meanwhile)}))
            error = self._as_persistence_error(WriteStage.OVERRIDE_SYNC, day.isoformat(), e)
            logger.error("Manual override write failed", day=day.isoformat(), error=str(error))
            raise error from e
        finally:
            self.overrides.release(day)

        metrics_collector.record_override_update()
        logger.info(
            "Manual override updated",
            day=day.isoformat(),
            capacity=updated.capacity,
            price=updated.price,
            blocked=updated.blocked,
        )
        return updated

    def _warn_if_not_open(self, booking: Booking, log) -> None:
        """Log when a booking lands on a full or blocked slot; never rejects."""
        day = parse_booking_date(booking.date)
        if day is None:
            return

        resource_ref = booking.package_id
        if booking.type == ResourceType.CAR:
            vehicle = next((v for v in self.catalog.fleet_vehicles if booking.mentions(v.name)), None)
            resource_ref = vehicle.id if vehicle else None

        slot = resolve_slot(
            booking.type,
            resource_ref,
            day,
            self.catalog,
            self.overrides,
            self.bookings,
            self.overrides.default,
        )
        status = slot_status(slot, self.filling_threshold)
        if status in (SlotStatus.FULL, SlotStatus.BLOCKED) and slot.capacity > 0:
            log.warning(
                "Booking accepted on a slot that is not open",
                slot_status=status.value,
                capacity=slot.capacity,
                booked=slot.booked,
            )

    async def _sync_remaining_seats(self, result: ReconciliationResult, package: TourPackage, guest_count: int, log) -> None:
        """
        Lower the package's remaining seats locally, then durably.

        The local value drops before the write so concurrent bookings of the
        same package stack up. A failed write hands the seats back by the same
        amount, leaving other bookings' decrements in place.
        """
        remaining = max(0, package.remaining_seats - guest_count)
        taken = package.remaining_seats - remaining
        self.catalog.replace_package(package.model_copy(update={"remaining_seats": remaining}))

        await self._side_effect(
            result,
            WriteStage.REMAINING_SEATS_SYNC,
            self.master_data.update_remaining_seats(package.id, remaining),
            log,
        )
        if result.committed and WriteStage.REMAINING_SEATS_SYNC not in result.failed_side_effects:
            return

        current = self.catalog.find_package(package.id)
        if current is not None and current.remaining_seats is not None:
            self.catalog.replace_package(
                current.model_copy(update={"remaining_seats": current.remaining_seats + taken})
            )

    async def _side_effect(self, result: ReconciliationResult, stage: WriteStage, call: Awaitable[None], log) -> None:
        try:
            await self._durable(call)
        except Exception as e:
            error = self._as_persistence_error(stage, result.booking.id, e)
            metrics_collector.record_side_effect_failure(stage.value)
            if self.policy.should_rollback(stage):
                self._roll_back(result, error, log)
                return
            result.failed_side_effects.append(stage)
            log.error("Best-effort sync failed, booking kept", stage=stage.value, error=str(error))

    def _roll_back(self, result: ReconciliationResult, error: PersistenceError, log) -> ReconciliationResult:
        compensation = invert(result.mutation)
        apply_compensation(compensation, self.bookings, self.overrides)
        metrics_collector.record_booking_rolled_back(result.booking.type.value)
        log.warning("Booking rolled back", stage=error.stage, error=str(error))

        result.outcome = ReconciliationOutcome.ROLLED_BACK
        result.compensation = compensation
        result.error = error
        return result

    @staticmethod
    def _as_persistence_error(stage: WriteStage, resource_id: str, exc: Exception) -> PersistenceError:
        if isinstance(exc, PersistenceError):
            return exc
        if isinstance(exc, asyncio.TimeoutError):
            detail = f"Durable write timed out during {stage.value}"
        else:
            detail = f"Durable write failed during {stage.value}: {exc}"
        return PersistenceError(stage=stage.value, detail=detail, resource_id=resource_id)
