"""Master data model definitions."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base


class TourPackageRecord(Base):
    """Tour package master data."""

    __tablename__ = "tour_packages"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    capacity_default: Mapped[int] = mapped_column(Integer, nullable=False, default=20)
    price_default: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    remaining_seats: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("capacity_default >= 0", name="ck_tour_package_capacity_non_negative"),
        CheckConstraint("price_default >= 0", name="ck_tour_package_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<TourPackageRecord(id={self.id}, title='{self.title}')>"


class TransportRecord(Base):
    """Transport master data; buses and cars share one table, told apart by type."""

    __tablename__ = "transports"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    base_rate: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="Active")

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("capacity >= 0", name="ck_transport_capacity_non_negative"),
        CheckConstraint("base_rate >= 0", name="ck_transport_base_rate_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<TransportRecord(id={self.id}, name='{self.name}', type={self.type})>"
