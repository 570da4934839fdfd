"""Test configuration and fixtures."""

import asyncio
import os
from datetime import date
from typing import Awaitable, Callable

# Must be set before tourdesk.core.config is imported
os.environ.setdefault("TOURDESK_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("TOURDESK_ENVIRONMENT", "test")
os.environ.setdefault("TOURDESK_ENABLE_MIRROR_REFRESH", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tourdesk.core.database import Base
from tourdesk.core.dependencies import get_db
from tourdesk.models import *  # noqa: F403 - Import all models
from tourdesk.schemas.booking import Booking, BookingStatus
from tourdesk.schemas.catalog import BusAsset, FleetVehicle, TourPackage
from tourdesk.schemas.inventory import ManualOverride
from tourdesk.services.catalog_service import ResourceCatalog
from tourdesk.services.ledger import Ledger
from tourdesk.services.reconciliation_service import ReconciliationEngine

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeBookingWriter:
    """In-memory durable booking store with failure injection."""

    def __init__(self):
        self.rows: dict[str, Booking] = {}
        self.fail_with: Exception | None = None
        self.fail_ids: set[str] = set()
        self.delay = 0.0
        self.calls = 0
        self.on_write: Callable[[Booking], Awaitable[None]] | None = None

    async def create_booking(self, booking: Booking) -> None:
        self.calls += 1
        if self.on_write is not None:
            await self.on_write(booking)
        await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        if booking.id in self.fail_ids:
            raise ConnectionError(f"write rejected for {booking.id}")
        self.rows[booking.id] = booking

    async def list_bookings(self) -> list[Booking]:
        return list(reversed(self.rows.values()))

    async def update_booking_status(self, booking_id: str, status: BookingStatus) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.rows[booking_id] = self.rows[booking_id].model_copy(update={"status": status})


class FakeOverrideWriter:
    """In-memory durable override store with failure injection."""

    def __init__(self):
        self.rows: dict[date, ManualOverride] = {}
        self.fail_with: Exception | None = None
        self.puts = 0

    async def get_override(self, day: date) -> ManualOverride | None:
        return self.rows.get(day)

    async def put_override(self, day: date, override: ManualOverride) -> None:
        self.puts += 1
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        self.rows[day] = override

    async def list_overrides(self) -> dict[date, ManualOverride]:
        return dict(self.rows)


class FakeMasterData:
    """In-memory master-data provider with failure injection."""

    def __init__(self, catalog: ResourceCatalog):
        self.catalog = catalog
        self.remaining_seats: dict[str, int] = {}
        self.fail_with: Exception | None = None

    async def list_tour_packages(self) -> list[TourPackage]:
        return list(self.catalog.tour_packages)

    async def list_fleet_vehicles(self) -> list[FleetVehicle]:
        return list(self.catalog.fleet_vehicles)

    async def list_bus_assets(self) -> list[BusAsset]:
        return list(self.catalog.bus_assets)

    async def update_remaining_seats(self, package_id: str, remaining_seats: int) -> None:
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise self.fail_with
        self.remaining_seats[package_id] = remaining_seats


@pytest.fixture
def sample_catalog():
    """Catalog with one tracked tour package, two cars and one bus."""
    return ResourceCatalog(
        tour_packages=[
            TourPackage(id="PKG-001", title="Romantic Udaipur Getaway", capacity_default=20, price_default=35000, remaining_seats=20),
            TourPackage(id="PKG-002", title="Goa Beach Escape", capacity_default=30, price_default=24000),
        ],
        fleet_vehicles=[
            FleetVehicle(id="TRN-001", name="Innova Crysta", capacity=6, base_rate=4500, type="SUV"),
            FleetVehicle(id="TRN-002", name="Swift Dzire", capacity=4, base_rate=2500, type="Sedan"),
        ],
        bus_assets=[
            BusAsset(id="TRN-004", name="Volvo Bus AC", capacity=40, base_rate=20000),
        ],
    )


@pytest.fixture
def ledger(sample_catalog):
    """Ledger over the sample catalog with default Tour day settings."""
    ledger = Ledger.with_defaults(capacity=20, price=35000)
    ledger.catalog = sample_catalog
    return ledger


@pytest.fixture
def booking_writer():
    return FakeBookingWriter()


@pytest.fixture
def override_writer():
    return FakeOverrideWriter()


@pytest.fixture
def master_data(sample_catalog):
    return FakeMasterData(sample_catalog)


@pytest.fixture
def engine(ledger, booking_writer, override_writer, master_data):
    """Reconciliation engine wired to the in-memory durable fakes."""
    return ReconciliationEngine(
        bookings=ledger.bookings,
        overrides=ledger.overrides,
        catalog=ledger.catalog,
        booking_writer=booking_writer,
        override_writer=override_writer,
        master_data=master_data,
        write_timeout=1.0,
    )


@pytest.fixture
def tour_booking_data():
    """Sample Tour booking payload."""
    return {
        "type": "Tour",
        "date": "2026-11-10",
        "package_id": "PKG-001",
        "title": "Romantic Udaipur Getaway",
        "guests": "2 Adults, 1 Child",
        "customer": "Asha Rao",
        "email": "asha@example.com",
        "amount": 105000,
    }


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_app(test_session, ledger):
    """Create the application over the test session, without its lifespan."""
    from tourdesk.main import create_app

    app = create_app(ledger)

    # Override database dependency
    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db

    yield app

    # Clean up
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
