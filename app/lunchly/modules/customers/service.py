from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.lunchly.errors import NotFoundError, translate_store_errors
from app.lunchly.modules.customers.models import Customer
from app.lunchly.modules.reservations.models import Reservation
from app.lunchly.modules.reservations.service import ReservationStore

logger = logging.getLogger(__name__)

TOP_CUSTOMERS_LIMIT = 10

# Matches the `full_name` property: first and last name joined by one space.
FULL_NAME_EXPR = Customer.first_name + " " + Customer.last_name


def _clean(value: str | None) -> str | None:
    return (value or "").strip() or None


def customer_from_payload(payload: dict) -> Customer:
    """
    Build an unsaved Customer from form input.

    Blank fields become None; a blank first or last name is left for the
    database to reject on save.
    """
    return Customer(
        first_name=_clean(payload.get("first_name")),
        last_name=_clean(payload.get("last_name")),
        phone=_clean(payload.get("phone")),
        notes=_clean(payload.get("notes")),
    )


def apply_customer_payload(customer: Customer, payload: dict) -> Customer:
    customer.first_name = _clean(payload.get("first_name"))  # type: ignore[assignment]
    customer.last_name = _clean(payload.get("last_name"))  # type: ignore[assignment]
    customer.phone = _clean(payload.get("phone"))
    customer.notes = _clean(payload.get("notes"))
    return customer


class CustomerStore:
    """Load, search and persist customers."""

    def __init__(self, s: Session) -> None:
        self.s = s
        self.reservations = ReservationStore(s)

    def list_all(self, search_term: str | None = None) -> list[Customer]:
        """
        All customers ordered by last name, first name.

        With a search term, only customers whose "first last" contains it,
        case-insensitively. LIKE wildcards in the term match literally.
        """
        q = self.s.query(Customer)
        if search_term:
            q = q.filter(FULL_NAME_EXPR.icontains(search_term, autoescape=True))
        with translate_store_errors(self.s, "customer list"):
            return q.order_by(Customer.last_name.asc(), Customer.first_name.asc()).all()

    def get_by_id(self, customer_id: int) -> Customer:
        with translate_store_errors(self.s, "customer lookup"):
            customer = self.s.query(Customer).filter(Customer.id == customer_id).one_or_none()
        if customer is None:
            raise NotFoundError(f"No such customer: {customer_id}")
        return customer

    def get_top_by_reservation_count(self, limit: int = TOP_CUSTOMERS_LIMIT) -> list[Customer]:
        """Customers with the most reservations first. Customers with none are never included."""
        q = (
            self.s.query(Customer)
            .join(Reservation, Reservation.customer_id == Customer.id)
            .group_by(Customer.id)
            .order_by(
                func.count(Reservation.id).desc(),
                Customer.last_name.asc(),
                Customer.first_name.asc(),
                Customer.id.asc(),
            )
            .limit(limit)
        )
        with translate_store_errors(self.s, "top customers"):
            return q.all()

    def get_reservations(self, customer: Customer) -> list[Reservation]:
        return self.reservations.list_for_customer(customer.id)

    def save(self, customer: Customer) -> None:
        """
        Insert a new customer (and set its id) or update the row matching its id.

        A customer loaded through this session is written by the ORM flush; any
        other instance updates by id and refreshes copies already in the session.
        Raises NotFoundError when no row has that id.
        """
        if customer.id is None:
            with translate_store_errors(self.s, "customer insert"):
                self.s.add(customer)
                self.s.flush()
            logger.info("Customer %s created", customer.id)
            return

        if customer in self.s:
            # loaded through this session: the ORM flush writes the changed columns
            with translate_store_errors(self.s, "customer update"):
                self.s.flush([customer])
            logger.info("Customer %s updated", customer.id)
            return

        with translate_store_errors(self.s, "customer update"):
            updated = (
                self.s.query(Customer)
                .filter(Customer.id == customer.id)
                .update(
                    {
                        Customer.first_name: customer.first_name,
                        Customer.last_name: customer.last_name,
                        Customer.phone: customer.phone,
                        Customer.notes: customer.notes,
                    },
                    synchronize_session="evaluate",
                )
            )
        if updated == 0:
            raise NotFoundError(f"No such customer: {customer.id}")
        logger.info("Customer %s updated", customer.id)
