from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, request, url_for

from app.lunchly.db import db_session
from app.lunchly.modules.customers.service import (
    CustomerStore,
    apply_customer_payload,
    customer_from_payload,
)

bp = Blueprint("customers", __name__)


def _customer_form() -> dict:
    return {
        "first_name": request.form.get("first_name"),
        "last_name": request.form.get("last_name"),
        "phone": request.form.get("phone"),
        "notes": request.form.get("notes"),
    }


# ---------- List ----------
@bp.get("/")
def customers_list():
    search = (request.args.get("search") or "").strip()
    customers = CustomerStore(db_session()).list_all(search or None)
    return render_template("customers/list.html", customers=customers, search=search)


@bp.get("/top-ten/", strict_slashes=False)
def customers_top_ten():
    customers = CustomerStore(db_session()).get_top_by_reservation_count()
    return render_template("customers/top_ten.html", customers=customers)


# ---------- New ----------
@bp.get("/add/", strict_slashes=False)
def customer_new_get():
    return render_template("customers/new.html")


@bp.post("/add/", strict_slashes=False)
def customer_new_post():
    s = db_session()
    customer = customer_from_payload(_customer_form())
    CustomerStore(s).save(customer)
    s.commit()

    flash(f"Added {customer.full_name}.", "success")
    return redirect(url_for("customers.customer_detail", customer_id=customer.id))


# ---------- Detail ----------
@bp.get("/<int:customer_id>/", strict_slashes=False)
def customer_detail(customer_id: int):
    store = CustomerStore(db_session())
    customer = store.get_by_id(customer_id)
    reservations = store.get_reservations(customer)
    return render_template("customers/detail.html", customer=customer, reservations=reservations)


# ---------- Edit ----------
@bp.get("/<int:customer_id>/edit/", strict_slashes=False)
def customer_edit_get(customer_id: int):
    customer = CustomerStore(db_session()).get_by_id(customer_id)
    return render_template("customers/edit.html", customer=customer)


@bp.post("/<int:customer_id>/edit/", strict_slashes=False)
def customer_edit_post(customer_id: int):
    s = db_session()
    store = CustomerStore(s)
    customer = store.get_by_id(customer_id)
    apply_customer_payload(customer, _customer_form())
    store.save(customer)
    s.commit()

    flash("Customer updated.", "success")
    return redirect(url_for("customers.customer_detail", customer_id=customer.id))
