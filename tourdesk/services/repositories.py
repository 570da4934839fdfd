"""SQLAlchemy implementations of the durable collaborators."""

import logging
from datetime import date

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, PersistenceError
from ..models.booking import BookingRecord
from ..models.catalog import TourPackageRecord, TransportRecord
from ..models.inventory import DailyInventory
from ..schemas.booking import Booking, BookingStatus
from ..schemas.catalog import BusAsset, FleetVehicle, TourPackage
from ..schemas.inventory import ManualOverride
from .catalog_service import BUS_TYPES

logger = logging.getLogger(__name__)


def _booking_from_record(record: BookingRecord) -> Booking:
    return Booking(
        id=record.id,
        type=record.type,
        date=record.date,
        status=record.status,
        package_id=record.package_id,
        title=record.title,
        details=record.details,
        guests=record.guests,
        customer=record.customer,
        email=record.email,
        amount=record.amount,
    )


def _override_from_record(record: DailyInventory) -> ManualOverride:
    return ManualOverride(
        capacity=record.capacity,
        price=record.price,
        blocked=record.is_blocked,
        booked=record.booked,
    )


class SqlBookingRepository:
    """Durable booking store over an async session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_booking(self, booking: Booking) -> None:
        """
        Insert a booking.

        Raises:
            PersistenceError: If the insert or commit fails
        """
        record = BookingRecord(
            id=booking.id,
            type=booking.type.value,
            date=booking.date,
            status=booking.status.value,
            package_id=booking.package_id,
            title=booking.title,
            details=booking.details,
            guests=booking.guests,
            customer=booking.customer,
            email=booking.email,
            amount=booking.amount,
        )
        try:
            self.db.add(record)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Booking insert failed",
                extra={"booking_id": booking.id, "error": str(e)}
            )
            raise PersistenceError(stage="primary", detail=f"Booking insert failed: {e}", resource_id=booking.id) from e

    async def list_bookings(self) -> list[Booking]:
        """Get all bookings, newest first."""
        stmt = select(BookingRecord).order_by(BookingRecord.created_at.desc(), BookingRecord.id)
        result = await self.db.execute(stmt)
        return [_booking_from_record(record) for record in result.scalars()]

    async def update_booking_status(self, booking_id: str, status: BookingStatus) -> None:
        """
        Change the status of a stored booking.

        Raises:
            NotFoundError: If the booking does not exist
            PersistenceError: If the update fails
        """
        try:
            stmt = (
                update(BookingRecord)
                .where(BookingRecord.id == booking_id)
                .values(status=status.value)
            )
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                await self.db.rollback()
                raise NotFoundError(resource_type="booking", resource_id=booking_id)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(stage="status_update", detail=f"Status update failed: {e}", resource_id=booking_id) from e


class SqlOverrideRepository:
    """Durable per-date override store over an async session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_override(self, day: date) -> ManualOverride | None:
        """Get the stored override for a date."""
        record = await self.db.get(DailyInventory, day)
        return _override_from_record(record) if record else None

    async def put_override(self, day: date, override: ManualOverride) -> None:
        """
        Upsert the override for a date.

        Raises:
            PersistenceError: If the write fails
        """
        try:
            record = await self.db.get(DailyInventory, day)
            if record is None:
                record = DailyInventory(date=day)
                self.db.add(record)
            record.capacity = override.capacity
            record.price = override.price
            record.is_blocked = override.blocked
            record.booked = override.booked
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                "Override upsert failed",
                extra={"date": day.isoformat(), "error": str(e)}
            )
            raise PersistenceError(stage="override_sync", detail=f"Override upsert failed: {e}") from e

    async def list_overrides(self) -> dict[date, ManualOverride]:
        """Get all stored overrides ordered by date."""
        stmt = select(DailyInventory).order_by(DailyInventory.date)
        result = await self.db.execute(stmt)
        return {record.date: _override_from_record(record) for record in result.scalars()}


class SqlMasterDataRepository:
    """Master-data provider over an async session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_tour_packages(self) -> list[TourPackage]:
        """Get all tour packages."""
        stmt = select(TourPackageRecord).order_by(TourPackageRecord.created_at, TourPackageRecord.id)
        result = await self.db.execute(stmt)
        return [
            TourPackage(
                id=record.id,
                title=record.title,
                capacity_default=record.capacity_default,
                price_default=record.price_default,
                remaining_seats=record.remaining_seats,
            )
            for record in result.scalars()
        ]

    async def _active_transports(self) -> list[TransportRecord]:
        stmt = (
            select(TransportRecord)
            .where(TransportRecord.status == "Active")
            .order_by(TransportRecord.created_at, TransportRecord.id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def list_fleet_vehicles(self) -> list[FleetVehicle]:
        """Get active transports of the Car class."""
        return [
            FleetVehicle(
                id=record.id,
                name=record.name,
                capacity=record.capacity,
                base_rate=record.base_rate,
                type=record.type,
            )
            for record in await self._active_transports()
            if record.type not in BUS_TYPES
        ]

    async def list_bus_assets(self) -> list[BusAsset]:
        """Get active transports of the Bus class."""
        return [
            BusAsset(
                id=record.id,
                name=record.name,
                capacity=record.capacity,
                base_rate=record.base_rate,
            )
            for record in await self._active_transports()
            if record.type in BUS_TYPES
        ]

    async def update_remaining_seats(self, package_id: str, remaining_seats: int) -> None:
        """
        Store a package's advertised remaining seats.

        Raises:
            PersistenceError: If the update fails
        """
        try:
            stmt = (
                update(TourPackageRecord)
                .where(TourPackageRecord.id == package_id)
                .values(remaining_seats=remaining_seats)
            )
            await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(
                stage="remaining_seats_sync",
                detail=f"Remaining seats update failed: {e}",
                resource_id=package_id,
            ) from e
