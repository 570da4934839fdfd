#!/usr/bin/env python3
"""Setup script for the tourdesk booking API: migrate, then seed master data."""

import asyncio
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import func, select

from tourdesk.core.database import async_session_factory, close_db
from tourdesk.models import TourPackageRecord, TransportRecord

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DB_DIR = Path(__file__).parent.parent / "db"

SAMPLE_PACKAGES = [
    {"id": "PKG-001", "title": "Romantic Udaipur Getaway", "capacity_default": 20, "price_default": 35000, "remaining_seats": 20},
    {"id": "PKG-002", "title": "Goa Beach Escape", "capacity_default": 30, "price_default": 24000, "remaining_seats": None},
]

SAMPLE_TRANSPORTS = [
    {"id": "TRN-001", "name": "Innova Crysta", "type": "SUV", "capacity": 6, "base_rate": 4500},
    {"id": "TRN-002", "name": "Swift Dzire", "type": "Sedan", "capacity": 4, "base_rate": 2500},
    {"id": "TRN-003", "name": "Tempo Traveller (12 Seater)", "type": "Tempo Traveller", "capacity": 12, "base_rate": 8000},
    {"id": "TRN-004", "name": "Volvo Bus AC", "type": "Bus", "capacity": 45, "base_rate": 20000},
]


def run_migrations() -> None:
    """Upgrade the schema to the latest Alembic revision."""
    alembic_cfg = Config(str(DB_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(DB_DIR / "alembic"))

    logger.info("Running database migrations...")
    command.upgrade(alembic_cfg, "head")
    logger.info("Database migrations completed")


async def create_sample_data() -> None:
    """Insert sample packages and transports unless master data already exists."""
    logger.info("Creating sample data...")

    async with async_session_factory() as db:
        existing = await db.scalar(select(func.count()).select_from(TransportRecord))
        if existing:
            logger.info("Sample data already exists, skipping...")
            return

        try:
            db.add_all(TourPackageRecord(**package) for package in SAMPLE_PACKAGES)
            db.add_all(TransportRecord(status="Active", **transport) for transport in SAMPLE_TRANSPORTS)
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error(f"Failed to create sample data: {e}")
            raise

    await close_db()
    logger.info("Sample data created successfully!")


def main() -> None:
    """Main setup function."""
    logger.info("Starting tourdesk setup...")

    # env.py drives its own event loop, so migrations run before ours starts
    run_migrations()
    asyncio.run(create_sample_data())

    logger.info("Setup completed successfully!")
    logger.info("You can now start the API server with: uvicorn tourdesk.main:app --reload")


if __name__ == "__main__":
    main()
