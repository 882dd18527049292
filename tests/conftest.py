from datetime import datetime

import pytest

from app.lunchly import create_app
from app.lunchly.db import session_scope
from app.lunchly.models import Base
from app.lunchly.modules.customers.models import Customer
from app.lunchly.modules.reservations.models import Reservation

CSRF_TOKEN = "test-csrf-token"


def _seed(s) -> dict:
    """Three customers: #1 has one reservation, #2 has two, #3 has none."""
    c1 = Customer(first_name="testfirst1", last_name="testlast1", phone="1", notes="testnotes1")
    c2 = Customer(first_name="testfirst2", last_name="testlast2", phone="2", notes="testnotes2")
    c3 = Customer(first_name="testfirst3", last_name="testlast3", phone="3", notes="testnotes3")
    s.add_all([c1, c2, c3])
    s.flush()

    start = datetime(2018, 9, 8, 12, 20, 7)
    r1 = Reservation(customer_id=c1.id, num_guests=50, start_at=start, notes="testresnote1")
    r2 = Reservation(customer_id=c2.id, num_guests=75, start_at=start, notes="testresnote2")
    r3 = Reservation(customer_id=c2.id, num_guests=80, start_at=start, notes="testresnote3")
    s.add_all([r1, r2, r3])
    s.flush()

    return {
        "cust1": c1.id,
        "cust2": c2.id,
        "cust3": c3.id,
        "res1": r1.id,
        "res2": r2.id,
        "res3": r3.id,
    }


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.delenv("SQL_ECHO", raising=False)

    app = create_app()
    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)
    return app


@pytest.fixture()
def ids(app):
    with session_scope(app) as s:
        return _seed(s)


@pytest.fixture()
def session(app, ids):
    s = app.extensions["sqlalchemy_sessionmaker"]()
    try:
        yield s
    finally:
        s.rollback()
        s.close()


@pytest.fixture()
def client(app, ids):
    return app.test_client()


@pytest.fixture()
def post(client):
    """POST with a valid CSRF token in both the session and the form."""
    with client.session_transaction() as sess:
        sess["csrf_token"] = CSRF_TOKEN

    def _post(url: str, data: dict | None = None, **kwargs):
        form = dict(data or {})
        form["csrf_token"] = CSRF_TOKEN
        return client.post(url, data=form, **kwargs)

    return _post
