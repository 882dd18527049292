from __future__ import annotations

from flask import Blueprint, flash, redirect, request, url_for

from app.lunchly.db import db_session
from app.lunchly.modules.customers.service import CustomerStore
from app.lunchly.modules.reservations.service import ReservationStore, reservation_from_payload

bp = Blueprint("reservations", __name__)


@bp.post("/<int:customer_id>/add-reservation/", strict_slashes=False)
def reservation_new_post(customer_id: int):
    s = db_session()
    customer = CustomerStore(s).get_by_id(customer_id)

    payload = {
        "num_guests": request.form.get("num_guests"),
        "start_at": request.form.get("start_at"),
        "notes": request.form.get("notes"),
    }
    reservation = reservation_from_payload(customer.id, payload)
    ReservationStore(s).save(reservation)
    s.commit()

    flash("Reservation added.", "success")
    return redirect(url_for("customers.customer_detail", customer_id=customer.id))
