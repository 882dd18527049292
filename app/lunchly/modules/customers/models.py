from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, object_session

from app.lunchly.models import Base

if TYPE_CHECKING:
    from app.lunchly.modules.reservations.models import Reservation


class Customer(Base):
    """
    A restaurant customer.

    `id` stays None until the first save. Reservations are not held on the
    record; `get_reservations()` fetches them on demand.
    """

    __tablename__ = "customers"
    __table_args__ = (
        Index("idx_customers_name", "last_name", "first_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def get_reservations(self) -> list["Reservation"]:
        """Reservations for this customer, read from the session that loaded it."""
        s = object_session(self)
        if s is None:
            raise RuntimeError(f"Customer {self.id} is not attached to a session")
        from app.lunchly.modules.reservations.service import ReservationStore

        return ReservationStore(s).list_for_customer(self.id)

    def __repr__(self) -> str:
        return f"<Customer id={self.id} name={self.full_name!r}>"
