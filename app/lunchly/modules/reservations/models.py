from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.lunchly.models import Base


def _ordinal(day: int) -> str:
    if 10 <= day % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        Index("idx_reservations_customer_id", "customer_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False)
    num_guests: Mapped[int] = mapped_column(Integer, nullable=False)
    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def formatted_start_at(self) -> str:
        """e.g. 'September 8th 2018, 12:20 pm'"""
        if self.start_at is None:
            return ""
        dt = self.start_at
        hour = dt.hour % 12 or 12
        ampm = "am" if dt.hour < 12 else "pm"
        return f"{dt:%B} {_ordinal(dt.day)} {dt.year}, {hour}:{dt.minute:02d} {ampm}"

    def __repr__(self) -> str:
        return f"<Reservation id={self.id} customer_id={self.customer_id} num_guests={self.num_guests}>"
