"""Booking model definition."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base


class BookingRecord(Base):
    """Durable booking row."""

    __tablename__ = "bookings"

    # Primary key (opaque, caller-generated)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Resource classification
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    package_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)

    # Service date as supplied (YYYY-MM-DD)
    date: Mapped[str] = mapped_column(String(32), nullable=False, index=True)

    # Booking details
    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    guests: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    # Constraints
    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_booking_amount_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"<BookingRecord(id={self.id}, type={self.type}, "
            f"date={self.date}, status={self.status})>"
        )
