from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import inspect
from sqlalchemy.orm import Session, make_transient

from app.lunchly.errors import translate_store_errors
from app.lunchly.modules.reservations.models import Reservation

logger = logging.getLogger(__name__)

START_AT_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M")


def parse_start_at(raw: str | None) -> datetime | None:
    """Parse a form timestamp (`2018-09-08 12:20:07` or datetime-local). None if unparseable."""
    if not raw:
        return None
    raw = raw.strip()
    for fmt in START_AT_FORMATS:
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    return None


def parse_num_guests(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def reservation_from_payload(customer_id: int, payload: dict) -> Reservation:
    """Unparseable guest counts and timestamps become None and fail on save."""
    return Reservation(
        customer_id=customer_id,
        num_guests=parse_num_guests(payload.get("num_guests")),
        start_at=parse_start_at(payload.get("start_at")),
        notes=(payload.get("notes") or "").strip() or None,
    )


class ReservationStore:
    """Insert and list reservations, always scoped by customer."""

    def __init__(self, s: Session) -> None:
        self.s = s

    def list_for_customer(self, customer_id: int) -> list[Reservation]:
        with translate_store_errors(self.s, "reservation list"):
            return (
                self.s.query(Reservation)
                .filter(Reservation.customer_id == customer_id)
                .order_by(Reservation.id.asc())
                .all()
            )

    def save(self, reservation: Reservation) -> None:
        """
        Insert `reservation` and set its id.

        Always an insert. Saving a reservation that was saved before writes a
        new row and replaces its id; the earlier row is left as it was.
        """
        state = inspect(reservation)
        if state.persistent or state.detached:
            make_transient(reservation)
        reservation.id = None  # type: ignore[assignment]
        with translate_store_errors(self.s, "reservation insert"):
            self.s.add(reservation)
            self.s.flush()
        logger.info("Reservation %s created for customer %s", reservation.id, reservation.customer_id)
