from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# Ensure module models are imported so Base.metadata includes their tables.
# (Kept at bottom to avoid circular imports.)
from app.lunchly.modules.customers.models import Customer  # noqa: E402,F401
from app.lunchly.modules.reservations.models import Reservation  # noqa: E402,F401
