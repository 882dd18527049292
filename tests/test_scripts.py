import pytest
from sqlalchemy import create_engine, func, inspect

from app.lunchly.modules.customers.models import Customer
from app.lunchly.modules.customers.service import CustomerStore
from scripts._db_utils import script_session
from scripts.init_db import DEMO_CUSTOMERS, create_tables, seed_demo
from scripts.release import run_release
from scripts.start import _port


def test_init_db_creates_tables_and_seeds_once(tmp_path):
    db_url = f"sqlite:///{tmp_path/'seed.db'}"
    create_tables(db_url)

    assert seed_demo(db_url) == len(DEMO_CUSTOMERS)
    assert seed_demo(db_url) == 0

    with script_session(db_url) as s:
        assert s.query(func.count(Customer.id)).scalar() == len(DEMO_CUSTOMERS)
        top = CustomerStore(s).get_top_by_reservation_count()
        assert [c.full_name for c in top] == ["Anthony Gonzales", "Tina Hsu"]


def test_release_runs_migrations(tmp_path, monkeypatch):
    db_url = f"sqlite:///{tmp_path/'release.db'}"
    monkeypatch.setenv("DATABASE_URL", db_url)
    monkeypatch.setenv("ENV", "test")

    run_release()
    # a second run finds everything at head
    run_release()

    engine = create_engine(db_url)
    try:
        insp = inspect(engine)
        assert {"customers", "reservations", "alembic_version"} <= set(insp.get_table_names())
        assert "idx_customers_name" in {ix["name"] for ix in insp.get_indexes("customers")}
        assert "idx_reservations_customer_id" in {ix["name"] for ix in insp.get_indexes("reservations")}
    finally:
        engine.dispose()

    seed_demo(db_url)
    with script_session(db_url) as s:
        assert s.query(func.count(Customer.id)).scalar() == len(DEMO_CUSTOMERS)


def test_release_requires_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        run_release()


def test_release_refuses_sqlite_in_production(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'prod.db'}")
    monkeypatch.setenv("ENV", "production")
    with pytest.raises(RuntimeError, match="sqlite"):
        run_release()
    assert not (tmp_path / "prod.db").exists()


def test_port(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    assert _port() == "8080"

    monkeypatch.setenv("PORT", "5000")
    assert _port() == "5000"

    for bad in ("http", "0", "70000"):
        monkeypatch.setenv("PORT", bad)
        with pytest.raises(SystemExit):
            _port()
