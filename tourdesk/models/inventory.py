"""Daily inventory (Tour manual override) model definition."""

import datetime as dt

from sqlalchemy import Boolean, CheckConstraint, Date, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base


class DailyInventory(Base):
    """Per-date Tour override with its stored booked counter."""

    __tablename__ = "daily_inventory"

    date: Mapped[dt.date] = mapped_column(Date, primary_key=True)

    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    is_blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    booked: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    updated_at: Mapped[dt.datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    # Constraints
    __table_args__ = (
        CheckConstraint("capacity >= 0", name="ck_daily_inventory_capacity_non_negative"),
        CheckConstraint("price >= 0", name="ck_daily_inventory_price_non_negative"),
        CheckConstraint("booked >= 0", name="ck_daily_inventory_booked_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"<DailyInventory(date={self.date}, booked={self.booked}/{self.capacity}, "
            f"blocked={self.is_blocked})>"
        )
